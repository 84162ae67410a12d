from typing import Union

from perps_analytics.core.models import BalanceBreakdown
from perps_analytics.core.parsing import parse_float


class BalanceService:
    @staticmethod
    def summarize_balance(perpetual_balance: Union[str, float], spot_balance: Union[str, float]) -> BalanceBreakdown:
        """永續 / 現貨資產分布。總額 <= 0 時比例為 0。"""
        perpetual = parse_float(perpetual_balance)
        spot = parse_float(spot_balance)
        total = perpetual + spot

        if total > 0:
            perpetual_percent = round((perpetual / total) * 100, 1)
            spot_percent = round((spot / total) * 100, 1)
        else:
            perpetual_percent = spot_percent = 0.0

        return BalanceBreakdown(
            perpetual=perpetual,
            spot=spot,
            total=total,
            perpetual_percent=perpetual_percent,
            spot_percent=spot_percent,
        )

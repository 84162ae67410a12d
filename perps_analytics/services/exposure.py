from typing import Iterable, Optional, Union

from perps_analytics.config.logging import logger
from perps_analytics.config.settings import settings
from perps_analytics.core.models import DirectionBias, ExposureSummary, PositionSide
from perps_analytics.core.parsing import parse_float
from perps_analytics.infrastructure.mapper import DashboardMapper, PositionInput


class ExposureService:
    """
    根據目前持倉與永續帳戶餘額計算曝險、保證金使用率與 ROE。
    """

    @staticmethod
    def direction_bias(long_value: float, short_value: float, threshold: Optional[float] = None) -> DirectionBias:
        factor = settings.BIAS_THRESHOLD if threshold is None else threshold
        if long_value > short_value * factor:
            return DirectionBias.LONG
        if short_value > long_value * factor:
            return DirectionBias.SHORT
        return DirectionBias.NEUTRAL

    @staticmethod
    def summarize_exposure(
        positions: Iterable[PositionInput],
        perp_balance: Union[str, float],
        threshold: Optional[float] = None,
    ) -> ExposureSummary:
        """
        負餘額不驗證也不拋錯：可用保證金夾到 0，使用率在餘額 <= 0 時為 0。
        """
        items = DashboardMapper.to_position_list(positions)
        balance = parse_float(perp_balance)

        total_upnl = sum(p.unrealized_profit for p in items)
        long_value = sum(p.notional for p in items if p.position_side is PositionSide.LONG)
        short_value = sum(p.notional for p in items if p.position_side is PositionSide.SHORT)

        margin_used = sum(p.isolated_margin for p in items)
        available = max(0.0, balance - margin_used)
        usage_ratio = (margin_used / balance) * 100 if balance > 0 else 0.0

        roe = round((total_upnl / margin_used) * 100, 2) if margin_used > 0 else 0.0

        total_exposure = long_value + short_value
        if total_exposure > 0:
            long_percent = round((long_value / total_exposure) * 100, 1)
            short_percent = round((short_value / total_exposure) * 100, 1)
        else:
            long_percent = short_percent = 0.0

        summary = ExposureSummary(
            perp_balance=balance,
            position_count=len(items),
            total_unrealized_pnl=total_upnl,
            long_exposure_value=long_value,
            short_exposure_value=short_value,
            total_margin_used=margin_used,
            available_margin=available,
            margin_usage_ratio=usage_ratio,
            direction_bias=ExposureService.direction_bias(long_value, short_value, threshold),
            roe=roe,
            long_exposure_percent=long_percent,
            short_exposure_percent=short_percent,
        )
        logger.debug(
            f"Exposure: {len(items)} positions, margin {margin_used:.2f}/{balance:.2f}, "
            f"bias {summary.direction_bias.value}"
        )
        return summary

import time
from datetime import datetime
from typing import Iterable, Optional

from perps_analytics.config.logging import logger
from perps_analytics.core.models import PerformanceStats, TimePeriod
from perps_analytics.core.parsing import parse_choice
from perps_analytics.infrastructure.mapper import DashboardMapper, HistoryInput

MS_PER_DAY = 24 * 60 * 60 * 1000


def _now_ms(now: Optional[datetime]) -> int:
    if now is None:
        return int(time.time() * 1000)
    return int(now.timestamp() * 1000)


class PerformanceService:
    @staticmethod
    def cutoff_ms(period: TimePeriod, now: Optional[datetime] = None) -> int:
        return _now_ms(now) - parse_choice(TimePeriod, period).days * MS_PER_DAY

    @staticmethod
    def calculate_performance(
        history: Iterable[HistoryInput],
        period: TimePeriod = TimePeriod.ONE_WEEK,
        now: Optional[datetime] = None,
    ) -> PerformanceStats:
        """
        Calculate win rate and single-trade drawdown over a trailing window.

        A record belongs to the window when its updated_at (or created_at when
        updated_at is missing) is at or after now minus the period's day count.
        Drawdown here is the largest single losing trade, not a peak-to-trough
        equity decline.
        """
        period = parse_choice(TimePeriod, period)
        cutoff = PerformanceService.cutoff_ms(period, now)

        records = [
            r for r in DashboardMapper.to_history_list(history)
            if r.effective_time >= cutoff
        ]

        if not records:
            return PerformanceStats(
                period=period,
                win_rate=0.0,
                closed_positions=0,
                max_drawdown=0.0,
                max_drawdown_percent=0.0,
            )

        pnls = [r.realized_pnl for r in records]
        count = len(pnls)

        # Win: realized PnL > 0
        wins = sum(1 for r in records if r.is_profit())
        win_rate = round((wins / count) * 100, 2)

        # All-profitable windows have no drawdown
        max_drawdown = max(0.0, -min(pnls))

        # Largest gain floored at 1 so the ratio never divides by zero
        largest_gain = max(max(pnls), 1.0)
        max_drawdown_percent = round((max_drawdown / largest_gain) * 100, 2)

        stats = PerformanceStats(
            period=period,
            win_rate=win_rate,
            closed_positions=count,
            max_drawdown=max_drawdown,
            max_drawdown_percent=max_drawdown_percent,
            total_realized_pnl=round(sum(pnls), 2),
        )
        logger.debug(f"Performance ({period.value}): {stats}")
        return stats

from typing import Any, List

from perps_analytics.core.models import BalanceBreakdown, ExposureSummary, PerformanceStats, PnLChart
from perps_analytics.core.parsing import parse_float
from perps_analytics.services.pnl_timeseries import format_axis_tick, total_pnl

_PERIOD_LABELS = {
    "1w": "1 Week",
    "1m": "1 Month",
    "3m": "3 Months",
    "6m": "6 Months",
    "1y": "1 Year",
}


class ReportFormatter:
    @staticmethod
    def format_number(value: Any) -> str:
        """
        精簡數字顯示：>= 1M 顯示 M，>= 1K 顯示 K，其餘兩位小數。
        無法解析時顯示 0.00。
        """
        parsed = parse_float(value, default=None)
        if parsed is None:
            return "0.00"
        if parsed >= 1_000_000:
            return f"{parsed / 1_000_000:.2f}M"
        if parsed >= 1_000:
            return f"{parsed / 1_000:.2f}K"
        return f"{parsed:.2f}"

    @staticmethod
    def format_balance(balance: BalanceBreakdown) -> str:
        lines = ["💰 Account Balance"]
        lines.append(f"Total: ${balance.total:.2f}")
        lines.append(f"Perpetual: ${balance.perpetual:.2f} ({balance.perpetual_percent:.1f}%)")
        lines.append(f"Spot: ${balance.spot:.2f} ({balance.spot_percent:.1f}%)")
        return "\n".join(lines)

    @staticmethod
    def format_exposure(summary: ExposureSummary) -> str:
        fmt = ReportFormatter.format_number
        lines = ["📈 Positions Overview"]
        lines.append(f"Perp Total Value: ${fmt(summary.perp_balance)}")
        lines.append(f"Current Positions: {summary.position_count}")
        lines.append(f"Average Margin Used Ratio: {summary.margin_usage_ratio:.1f}%")
        lines.append(f"Available Margin: ${fmt(summary.available_margin)}")
        lines.append(f"Direction Bias: {summary.direction_bias.value}")
        lines.append(f"Long Exposure: {summary.long_exposure_percent:.1f}%")
        lines.append(f"Short Exposure: {summary.short_exposure_percent:.1f}%")
        lines.append(f"Long Value: ${fmt(summary.long_exposure_value)}")
        lines.append(f"Short Value: ${fmt(summary.short_exposure_value)}")
        lines.append(f"ROE: {summary.roe:.2f}%")
        lines.append(f"uPnL: ${fmt(summary.total_unrealized_pnl)}")
        return "\n".join(lines)

    @staticmethod
    def format_performance(stats: PerformanceStats) -> str:
        label = _PERIOD_LABELS.get(stats.period.value, stats.period.value)
        lines = [f"🔢 Trading Performance ({label})"]
        lines.append(f"Win Rate: {stats.win_rate:.2f}%")
        lines.append(f"Max Drawdown: {stats.max_drawdown_percent:.2f}% (${stats.max_drawdown:.2f})")
        lines.append(f"Closed Positions: {stats.closed_positions}")
        return "\n".join(lines)

    @staticmethod
    def format_pnl_series(chart: PnLChart) -> str:
        lines = [f"📊 PnL Over Time ({chart.time_range.value})"]
        if not chart.points:
            lines.append("No closed positions in range 💤")
            return "\n".join(lines)

        for point in chart.points:
            parts: List[str] = [f"{point.full_date}:"]
            if chart.show_bars:
                sign = '+' if point.daily_pnl > 0 else ''
                parts.append(f"Daily {sign}{point.daily_pnl:.2f}")
            if chart.show_line:
                parts.append(f"Total {point.cumulative_pnl:.2f}")
            lines.append(" ".join(parts))

        low, high = chart.scale.cumulative_domain
        lines.append("")
        lines.append(f"Net PnL: {total_pnl(chart.points):.2f}")
        lines.append(f"Axis: {format_axis_tick(low)} .. {format_axis_tick(high)} (interval {chart.scale.tick_interval})")
        return "\n".join(lines)

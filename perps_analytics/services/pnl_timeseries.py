import math
from datetime import date, datetime, time
from typing import Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pandas as pd

from perps_analytics.config.logging import logger
from perps_analytics.config.settings import settings
from perps_analytics.core.models import (
    ChartDataPoint,
    ChartDisplayMode,
    ChartScale,
    PnLChart,
    TimeRange,
)
from perps_analytics.core.parsing import parse_choice
from perps_analytics.infrastructure.mapper import DashboardMapper, HistoryInput

# 1W 以天數計算，1M / 3M 以日曆月計算 (月底會被夾到當月最後一天)
_RANGE_OFFSETS = {
    TimeRange.ONE_WEEK: pd.DateOffset(days=7),
    TimeRange.ONE_MONTH: pd.DateOffset(months=1),
    TimeRange.THREE_MONTHS: pd.DateOffset(months=3),
}

# (帳戶規模上限, 除數)，超過最後一個上限時使用 _LARGEST_DIVISOR
_TICK_BANDS = ((1_000, 300), (10_000, 500), (100_000, 1_000))
_LARGEST_DIVISOR = 2_000


def resolve_timezone(tz: Optional[str] = None) -> ZoneInfo:
    """取得分桶用時區，名稱無效時退回 UTC。"""
    name = tz or settings.TZ
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Invalid timezone {name}, falling back to UTC")
        return ZoneInfo("UTC")


def _short_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def _full_label(day: date) -> str:
    return f"{day:%b} {day.day}, {day.year}"


def aggregate_daily_pnl(history: Iterable[HistoryInput], tz: Optional[str] = None) -> List[ChartDataPoint]:
    """
    將歷史倉位依日曆日分桶，計算每日損益與累積損益。

    以 updated_at 決定所屬日期 (於指定時區)，缺失時退回 created_at；輸入順序不影響結果。
    回傳依日期遞增排序的 ChartDataPoint。
    """
    records = DashboardMapper.to_history_list(history)
    if not records:
        return []

    zone = resolve_timezone(tz)
    df = pd.DataFrame({
        "timestamp": [r.effective_time for r in records],
        "pnl": [r.realized_pnl for r in records],
    })
    df["pnl"] = pd.to_numeric(df["pnl"], errors="coerce").fillna(0.0)
    df = df.sort_values("timestamp", kind="mergesort")
    df["day"] = (
        pd.to_datetime(df["timestamp"], unit="ms", utc=True)
        .dt.tz_convert(zone.key)
        .dt.date
    )

    daily = df.groupby("day", sort=True)["pnl"].sum()
    cumulative = daily.cumsum()

    points = [
        ChartDataPoint(
            day=day,
            date=_short_label(day),
            full_date=_full_label(day),
            daily_pnl=round(float(daily_pnl), 2),
            cumulative_pnl=round(float(cumulative_pnl), 2),
        )
        for day, daily_pnl, cumulative_pnl in zip(daily.index, daily.to_numpy(), cumulative.to_numpy())
    ]
    logger.debug(f"Aggregated {len(records)} records into {len(points)} daily buckets ({zone.key})")
    return points


def _localized_now(now: Optional[datetime], zone: ZoneInfo) -> pd.Timestamp:
    if now is None:
        return pd.Timestamp.now(tz=zone.key)
    stamp = pd.Timestamp(now)
    if stamp.tzinfo is None:
        return stamp.tz_localize(zone.key)
    return stamp.tz_convert(zone.key)


def range_cutoff(time_range: TimeRange, now: Optional[datetime] = None, tz: Optional[str] = None) -> Optional[datetime]:
    """回傳時間區間的起點；ALL 沒有起點，回傳 None。"""
    time_range = parse_choice(TimeRange, time_range)
    if time_range is TimeRange.ALL:
        return None
    zone = resolve_timezone(tz)
    cutoff = _localized_now(now, zone) - _RANGE_OFFSETS[time_range]
    return cutoff.to_pydatetime()


def filter_by_time_range(
    points: Sequence[ChartDataPoint],
    time_range: TimeRange,
    now: Optional[datetime] = None,
    tz: Optional[str] = None,
) -> List[ChartDataPoint]:
    """
    依時間區間過濾資料點。ALL 不過濾。
    比較的是該日 00:00 (指定時區) 是否 >= cutoff。
    """
    cutoff = range_cutoff(time_range, now=now, tz=tz)
    if cutoff is None:
        return list(points)

    zone = resolve_timezone(tz)
    return [
        p for p in points
        if datetime.combine(p.day, time.min, tzinfo=zone) >= cutoff
    ]


def _padding(low: float, high: float) -> float:
    return abs(high - low) * 0.1 or 1.0


def tick_interval(magnitude: float) -> int:
    """依帳戶規模決定 Y 軸刻度間距，規模越大刻度越粗。"""
    if magnitude <= 0:
        return 0
    for upper, divisor in _TICK_BANDS:
        if magnitude < upper:
            return math.ceil(magnitude / divisor)
    return math.ceil(magnitude / _LARGEST_DIVISOR)


def compute_chart_scale(points: Sequence[ChartDataPoint]) -> ChartScale:
    daily_values = [p.daily_pnl for p in points]
    cumulative_values = [p.cumulative_pnl for p in points]

    # 每日損益軸永遠包含 0
    min_daily = min(daily_values + [0.0])
    max_daily = max(daily_values + [0.0])
    daily_pad = _padding(min_daily, max_daily)

    min_cumulative = min(cumulative_values) if cumulative_values else 0.0
    max_cumulative = max(cumulative_values) if cumulative_values else 0.0
    cumulative_pad = _padding(min_cumulative, max_cumulative)

    return ChartScale(
        daily_domain=(min_daily - daily_pad, max_daily + daily_pad),
        cumulative_domain=(min_cumulative - cumulative_pad, max_cumulative + cumulative_pad),
        tick_interval=tick_interval(abs(max_cumulative)),
    )


def format_axis_tick(value: float) -> str:
    """Y 軸刻度文字：絕對值小於 1 保留一位小數，其餘四捨五入為整數。"""
    if abs(value) < 1:
        return f"{value:.1f}"
    return str(math.floor(value + 0.5))


def build_pnl_chart(
    history: Iterable[HistoryInput],
    time_range: TimeRange = TimeRange.ALL,
    display_mode: ChartDisplayMode = ChartDisplayMode.BARS_AND_LINE,
    now: Optional[datetime] = None,
    tz: Optional[str] = None,
) -> PnLChart:
    """
    完整的 PnL 圖表資料流程：分桶 -> 區間過濾 -> 座標軸計算。
    """
    time_range = parse_choice(TimeRange, time_range)
    display_mode = parse_choice(ChartDisplayMode, display_mode)

    series = aggregate_daily_pnl(history, tz=tz)
    points = filter_by_time_range(series, time_range, now=now, tz=tz)

    return PnLChart(
        points=points,
        scale=compute_chart_scale(points),
        time_range=time_range,
        show_bars=display_mode.show_bars,
        show_line=display_mode.show_line,
    )


def total_pnl(points: Sequence[ChartDataPoint]) -> float:
    return round(sum(p.daily_pnl for p in points), 2)

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple


class TimeRange(str, Enum):
    """PnL 圖表的時間區間選項。"""
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    ALL = "ALL"


class TimePeriod(str, Enum):
    """交易績效統計的時間區間 (固定天數)。"""
    ONE_WEEK = "1w"
    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"

    @property
    def days(self) -> int:
        return _PERIOD_DAYS[self]


_PERIOD_DAYS = {
    TimePeriod.ONE_WEEK: 7,
    TimePeriod.ONE_MONTH: 30,
    TimePeriod.THREE_MONTHS: 90,
    TimePeriod.SIX_MONTHS: 180,
    TimePeriod.ONE_YEAR: 365,
}


class ChartDisplayMode(str, Enum):
    BARS = "bars"
    LINE = "line"
    BARS_AND_LINE = "bars+line"

    @property
    def show_bars(self) -> bool:
        return self in (ChartDisplayMode.BARS, ChartDisplayMode.BARS_AND_LINE)

    @property
    def show_line(self) -> bool:
        return self in (ChartDisplayMode.LINE, ChartDisplayMode.BARS_AND_LINE)


class PositionSide(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


class DirectionBias(str, Enum):
    LONG = "Long Bias"
    SHORT = "Short Bias"
    NEUTRAL = "Neutral"


@dataclass(frozen=True)
class PositionHistory:
    """
    歷史倉位紀錄 (Domain Model)。
    代表一筆已平倉或更新過的倉位事件，時間戳為毫秒。
    """
    position_id: str
    symbol_name: str
    realized_pnl: float    # 已實現損益，無法解析時為 0
    created_at: int        # ms since epoch
    updated_at: int        # ms since epoch，分桶以此為準

    @property
    def effective_time(self) -> int:
        # updated_at 缺失 (0) 時退回 created_at
        return self.updated_at or self.created_at

    def is_profit(self) -> bool:
        return self.realized_pnl > 0


@dataclass(frozen=True)
class Position:
    """
    目前持有的永續合約倉位。
    """
    symbol: str
    position_id: str
    position_type: str
    position_side: Optional[PositionSide]   # 無法辨識的方向為 None，不計入多空曝險
    position_size: float
    entry_price: float
    liquidation_price: float
    isolated_margin: float
    unrealized_profit: float
    leverage: float = 0.0

    @property
    def notional(self) -> float:
        """名目價值 (size x entry price)"""
        return self.position_size * self.entry_price


@dataclass(frozen=True)
class ChartDataPoint:
    day: date
    date: str              # e.g. "Oct 5"
    full_date: str         # e.g. "Oct 5, 2026"
    daily_pnl: float
    cumulative_pnl: float


@dataclass(frozen=True)
class ChartScale:
    """圖表 Y 軸範圍與刻度間距。"""
    daily_domain: Tuple[float, float]
    cumulative_domain: Tuple[float, float]
    tick_interval: int


@dataclass(frozen=True)
class PnLChart:
    points: List[ChartDataPoint]
    scale: ChartScale
    time_range: TimeRange
    show_bars: bool = True
    show_line: bool = True


@dataclass(frozen=True)
class PerformanceStats:
    period: TimePeriod
    win_rate: float               # 百分比，兩位小數
    closed_positions: int
    max_drawdown: float           # 單筆最大虧損 (絕對值)
    max_drawdown_percent: float   # 相對於單筆最大獲利的百分比
    total_realized_pnl: float = 0.0


@dataclass(frozen=True)
class ExposureSummary:
    perp_balance: float
    position_count: int
    total_unrealized_pnl: float
    long_exposure_value: float
    short_exposure_value: float
    total_margin_used: float
    available_margin: float
    margin_usage_ratio: float
    direction_bias: DirectionBias
    roe: float
    long_exposure_percent: float
    short_exposure_percent: float

    @property
    def margin_bar_width(self) -> float:
        return min(self.margin_usage_ratio, 100.0)


@dataclass(frozen=True)
class BalanceBreakdown:
    """
    資產分布快照 (永續 / 現貨)。
    """
    perpetual: float
    spot: float
    total: float
    perpetual_percent: float = 0.0
    spot_percent: float = 0.0

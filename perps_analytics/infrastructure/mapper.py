from typing import Any, Dict, Iterable, List, Optional, Union
from perps_analytics.config.logging import logger
from perps_analytics.core.models import Position, PositionHistory, PositionSide
from perps_analytics.core.parsing import parse_float, parse_int

HistoryInput = Union[PositionHistory, Dict[str, Any]]
PositionInput = Union[Position, Dict[str, Any]]


def _pick(raw: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return default


class DashboardMapper:
    """
    負責將資料來源的原始 JSON 紀錄轉換為核心 Domain Models。
    數字欄位一律寬鬆解析，無法解析時為 0。
    """

    @staticmethod
    def to_position_history(raw: Dict[str, Any]) -> PositionHistory:
        """
        將 position history 紀錄轉為 PositionHistory 物件。
        同時接受 snake_case 與 camelCase 欄位名稱。
        """
        raw_pnl = _pick(raw, "realized_pnl", "realizedPnl")
        pnl = parse_float(raw_pnl, default=None)
        if pnl is None:
            if raw_pnl not in (None, ""):
                logger.debug(f"Malformed realized_pnl {raw_pnl!r}, defaulting to 0")
            pnl = 0.0

        return PositionHistory(
            position_id=str(_pick(raw, "position_id", "positionId", default="")),
            symbol_name=str(_pick(raw, "symbol_name", "symbolName", default="")),
            realized_pnl=pnl,
            created_at=parse_int(_pick(raw, "created_at", "createdAt")),
            updated_at=parse_int(_pick(raw, "updated_at", "updatedAt")),
        )

    @staticmethod
    def to_position(raw: Dict[str, Any]) -> Position:
        """
        將 open position 紀錄轉為 Position 物件。
        """
        raw_side = str(raw.get("positionSide", "")).upper()
        try:
            side = PositionSide(raw_side)
        except ValueError:
            logger.debug(f"Unknown positionSide {raw_side!r} on {raw.get('symbol')}")
            side = None

        return Position(
            symbol=str(raw.get("symbol", "")),
            position_id=str(raw.get("positionId", "")),
            position_type=str(raw.get("positionType", "")),
            position_side=side,
            position_size=parse_float(raw.get("positionSize")),
            entry_price=parse_float(raw.get("entryPrice")),
            liquidation_price=parse_float(raw.get("liquidationPrice")),
            isolated_margin=parse_float(raw.get("isolatedMargin")),
            unrealized_profit=parse_float(raw.get("unrealizedProfit")),
            leverage=parse_float(raw.get("leverage")),
        )

    @staticmethod
    def to_history_list(records: Optional[Iterable[HistoryInput]]) -> List[PositionHistory]:
        # null 清單視為空
        return [
            r if isinstance(r, PositionHistory) else DashboardMapper.to_position_history(r)
            for r in records or ()
        ]

    @staticmethod
    def to_position_list(records: Optional[Iterable[PositionInput]]) -> List[Position]:
        return [
            r if isinstance(r, Position) else DashboardMapper.to_position(r)
            for r in records or ()
        ]

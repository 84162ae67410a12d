import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from perps_analytics.config.settings import settings
from perps_analytics.config.logging import logger
from perps_analytics.core.exceptions import AppError, DataSourceError
from perps_analytics.core.models import ChartDisplayMode, TimePeriod, TimeRange
from perps_analytics.services.balance import BalanceService
from perps_analytics.services.exposure import ExposureService
from perps_analytics.services.performance import PerformanceService
from perps_analytics.services.pnl_timeseries import build_pnl_chart
from perps_analytics.services.report_formatter import ReportFormatter

def load_snapshot(path: str) -> Dict[str, Any]:
    """讀取 JSON 快照 (history / positions / perpBalance / spotBalance)"""
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        raise DataSourceError(f"Failed to read snapshot {path}: {e}") from e

    if not isinstance(data, dict):
        raise DataSourceError(f"Snapshot {path} must be a JSON object")
    return data

def render(command: str, snapshot: Dict[str, Any], args: argparse.Namespace) -> str:
    history = snapshot.get("history") or []
    positions = snapshot.get("positions") or []
    perp_balance = snapshot.get("perpBalance", 0)
    spot_balance = snapshot.get("spotBalance", 0)

    sections: List[str] = []

    if command in ("balance", "report"):
        sections.append(ReportFormatter.format_balance(
            BalanceService.summarize_balance(perp_balance, spot_balance)
        ))

    if command in ("exposure", "report"):
        sections.append(ReportFormatter.format_exposure(
            ExposureService.summarize_exposure(positions, perp_balance)
        ))

    if command in ("performance", "report"):
        sections.append(ReportFormatter.format_performance(
            PerformanceService.calculate_performance(history, args.period)
        ))

    if command in ("pnl", "report"):
        chart = build_pnl_chart(history, args.range, args.mode, tz=args.tz)
        sections.append(ReportFormatter.format_pnl_series(chart))

    return "\n\n".join(sections)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Perpetual futures dashboard analytics")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (
        ("pnl", "Daily and cumulative PnL series"),
        ("performance", "Win rate and max drawdown"),
        ("exposure", "Open position exposure and margin usage"),
        ("balance", "Perpetual / spot balance breakdown"),
        ("report", "Every section above"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("snapshot", help="Path to a JSON snapshot file")
        sub.add_argument("--range", default=settings.DEFAULT_TIME_RANGE,
                         choices=[r.value for r in TimeRange])
        sub.add_argument("--mode", default=settings.DEFAULT_DISPLAY_MODE,
                         choices=[m.value for m in ChartDisplayMode])
        sub.add_argument("--period", default=settings.DEFAULT_TIME_PERIOD,
                         choices=[p.value for p in TimePeriod])
        sub.add_argument("--tz", default=None, help="IANA timezone for day buckets (default: TZ setting)")

    return parser

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        snapshot = load_snapshot(args.snapshot)
        print(render(args.command, snapshot, args))
    except AppError as e:
        logger.error(f"{args.command} failed: {e}")
        return 2

    return 0

if __name__ == "__main__":
    sys.exit(main())

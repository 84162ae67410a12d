import pytest
from perps_analytics.core.models import DirectionBias
from perps_analytics.services.exposure import ExposureService


def _pos(side, size, entry, margin, upnl="0", symbol="BTCUSDT"):
    return {
        "symbol": symbol,
        "positionId": f"{symbol}-{side}",
        "positionType": "ISOLATED",
        "positionSide": side,
        "positionSize": size,
        "entryPrice": entry,
        "liquidationPrice": "0",
        "isolatedMargin": margin,
        "unrealizedProfit": upnl,
        "leverage": 10,
    }


def test_long_bias_example():
    positions = [_pos("LONG", "2", "100", "50"), _pos("SHORT", "1", "100", "50")]
    summary = ExposureService.summarize_exposure(positions, "200")

    assert summary.long_exposure_value == 200
    assert summary.short_exposure_value == 100
    assert summary.total_margin_used == 100
    assert summary.available_margin == 100
    assert summary.margin_usage_ratio == 50
    assert summary.direction_bias is DirectionBias.LONG
    assert summary.long_exposure_percent == 66.7
    assert summary.short_exposure_percent == 33.3
    assert summary.position_count == 2


def test_empty_positions():
    summary = ExposureService.summarize_exposure([], "1000")

    assert summary.total_unrealized_pnl == 0
    assert summary.total_margin_used == 0
    assert summary.available_margin == 1000
    assert summary.margin_usage_ratio == 0
    assert summary.roe == 0
    assert summary.direction_bias is DirectionBias.NEUTRAL
    assert summary.long_exposure_percent == 0
    assert summary.short_exposure_percent == 0


def test_short_bias_and_neutral():
    short_heavy = [_pos("LONG", "1", "100", "10"), _pos("SHORT", "1", "130", "10")]
    balanced = [_pos("LONG", "1", "100", "10"), _pos("SHORT", "1", "115", "10")]

    assert ExposureService.summarize_exposure(short_heavy, "100").direction_bias is DirectionBias.SHORT
    assert ExposureService.summarize_exposure(balanced, "100").direction_bias is DirectionBias.NEUTRAL


def test_roe_and_unrealized_pnl():
    positions = [_pos("LONG", "1", "100", "60", upnl="15"), _pos("SHORT", "1", "50", "40", upnl="-5")]
    summary = ExposureService.summarize_exposure(positions, "500")

    assert summary.total_unrealized_pnl == 10
    assert summary.roe == 10.0
    assert summary.margin_usage_ratio == 20.0


def test_zero_and_negative_balance():
    positions = [_pos("LONG", "1", "100", "50")]

    zero = ExposureService.summarize_exposure(positions, "0")
    negative = ExposureService.summarize_exposure(positions, "-100")

    assert zero.margin_usage_ratio == 0
    assert zero.available_margin == 0
    assert negative.margin_usage_ratio == 0
    assert negative.available_margin == 0


def test_malformed_fields_default_to_zero():
    positions = [_pos("LONG", "abc", "100", "", upnl=None), _pos("SHORT", "1", "10", "5")]
    summary = ExposureService.summarize_exposure(positions, "not-a-number")

    assert summary.long_exposure_value == 0
    assert summary.short_exposure_value == 10
    assert summary.total_margin_used == 5
    assert summary.total_unrealized_pnl == 0
    assert summary.margin_usage_ratio == 0
    assert summary.direction_bias is DirectionBias.SHORT


def test_unknown_side_counts_margin_but_not_exposure():
    positions = [_pos("BOTH", "1", "100", "20")]
    summary = ExposureService.summarize_exposure(positions, "100")

    assert summary.long_exposure_value == 0
    assert summary.short_exposure_value == 0
    assert summary.total_margin_used == 20
    assert summary.direction_bias is DirectionBias.NEUTRAL


def test_margin_bar_width_is_capped():
    positions = [_pos("LONG", "1", "100", "300")]
    summary = ExposureService.summarize_exposure(positions, "100")

    assert summary.margin_usage_ratio == pytest.approx(300.0)
    assert summary.margin_bar_width == 100.0


def test_custom_bias_threshold():
    assert ExposureService.direction_bias(110, 100, threshold=1.05) is DirectionBias.LONG
    assert ExposureService.direction_bias(110, 100, threshold=1.2) is DirectionBias.NEUTRAL

import json
from perps_analytics.cmd.cli import main


def _write_snapshot(tmp_path):
    snapshot = {
        "history": [
            {"position_id": "1", "symbol_name": "BTCUSDT", "realized_pnl": "10.50",
             "created_at": 1790000000000, "updated_at": 1790000000000},
            {"position_id": "2", "symbol_name": "BTCUSDT", "realized_pnl": "-3.20",
             "created_at": 1790000001000, "updated_at": 1790000001000},
        ],
        "positions": [
            {"symbol": "BTCUSDT", "positionSide": "LONG", "positionSize": "2",
             "entryPrice": "100", "isolatedMargin": "50", "unrealizedProfit": "5"},
        ],
        "perpBalance": "200",
        "spotBalance": "50",
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot), encoding="utf-8")
    return path


def test_report_command(tmp_path, capsys):
    path = _write_snapshot(tmp_path)

    assert main(["report", str(path), "--tz", "UTC"]) == 0
    out = capsys.readouterr().out

    assert "Account Balance" in out
    assert "Direction Bias: Long Bias" in out
    assert "Trading Performance" in out
    assert "Total 7.30" in out


def test_pnl_command_bars_mode(tmp_path, capsys):
    path = _write_snapshot(tmp_path)

    assert main(["pnl", str(path), "--mode", "bars", "--tz", "UTC"]) == 0
    out = capsys.readouterr().out

    assert "Daily +7.30" in out
    assert "Total" not in out.split("Net PnL")[0]


def test_missing_snapshot(tmp_path):
    assert main(["exposure", str(tmp_path / "missing.json")]) == 2


def test_no_command():
    assert main([]) == 1


def test_null_lists_in_snapshot(tmp_path, capsys):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"history": None, "positions": None, "perpBalance": "1"}), encoding="utf-8")

    assert main(["report", str(path), "--tz", "UTC"]) == 0
    out = capsys.readouterr().out

    assert "Current Positions: 0" in out
    assert "No closed positions" in out

import json

from typer.testing import CliRunner

from entrypoints.cli.analyze import app

runner = CliRunner()


def _write_payload(tmp_path, payload):
    path = tmp_path / "listing.json"
    path.write_text(json.dumps(payload))
    return path


def test_cli_writes_report(tmp_path, analyze_payload):
    src = _write_payload(tmp_path, analyze_payload)
    out = tmp_path / "report.json"

    result = runner.invoke(app, ["analyze", str(src), "--rate", "5.5", "--self-managed", "--output", str(out)])

    assert result.exit_code == 0, result.output
    report = json.loads(out.read_text())
    assert report["financials"]["interest_rate"] == 5.5
    assert report["financials"]["expenses"]["management"] == 0.0


def test_cli_auto_maintenance_uses_condition(tmp_path, analyze_payload):
    analyze_payload["property"]["condition"] = "poor"
    analyze_payload["property"]["yearBuilt"] = 1975
    src = _write_payload(tmp_path, analyze_payload)
    out = tmp_path / "report.json"

    result = runner.invoke(app, ["analyze", str(src), "--auto-maintenance", "--output", str(out)])

    assert result.exit_code == 0, result.output
    report = json.loads(out.read_text())
    assert report["financials"]["maintenance_pct"] == 1.25
    ids = [c["id"] for c in report["sanity_checks"]]
    assert "deferred_maintenance" in ids


def test_cli_malformed_input_exits_2(tmp_path, analyze_payload):
    analyze_payload["config"] = {"loanTermYears": 0}
    src = _write_payload(tmp_path, analyze_payload)

    result = runner.invoke(app, ["analyze", str(src)])

    assert result.exit_code == 2


def test_cli_non_json_payload_exits_2(tmp_path):
    src = tmp_path / "listing.json"
    src.write_text("{not json")

    result = runner.invoke(app, ["analyze", str(src)])

    assert result.exit_code == 2
    assert "payload" in result.output


def test_cli_top_level_list_exits_2(tmp_path, analyze_payload):
    src = _write_payload(tmp_path, [analyze_payload])

    result = runner.invoke(app, ["analyze", str(src)])

    assert result.exit_code == 2
    assert "payload" in result.output


def test_cli_non_object_config_exits_2(tmp_path, analyze_payload):
    analyze_payload["config"] = [["interestRate", 5.0]]
    src = _write_payload(tmp_path, analyze_payload)

    result = runner.invoke(app, ["analyze", str(src)])

    assert result.exit_code == 2
    assert "config" in result.output

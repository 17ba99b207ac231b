from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from propquant.adapters.config import config
from propquant.domain.policy import suggest_maintenance_pct
from propquant.services.report import build_report
from propquant.services.validation import (
    MalformedInputError,
    parse_config,
    parse_property,
    parse_risks,
)

def _load_payload(path: Path) -> dict:
    try:
        payload = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise MalformedInputError("payload", f"not valid JSON ({e.msg}, line {e.lineno})") from e
    if not isinstance(payload, dict):
        raise MalformedInputError("payload", f"expected an object, got {type(payload).__name__}")
    return payload


app = typer.Typer(help="PropQuant underwriting audit (financials, checks, scores, projections).")


@app.command()
def analyze(
    payload_path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help='JSON file with "property", "risks" and optional "config"'
    ),
    rate: Optional[float] = typer.Option(None, help="Override annual interest rate (percent)"),
    down_payment: Optional[float] = typer.Option(None, help="Override down payment (percent)"),
    self_managed: Optional[bool] = typer.Option(
        None, "--self-managed/--pro-managed", help="Drop or keep the management fee"
    ),
    auto_maintenance: bool = typer.Option(
        False, "--auto-maintenance", help="Pick the maintenance tier from condition and age"
    ),
    output: Optional[Path] = typer.Option(None, help="Write the report here instead of stdout"),
) -> None:
    """
    Analyze one listing record and print the underwriting report as JSON.
    """
    try:
        payload = _load_payload(payload_path)
        prop = parse_property(payload.get("property"))
        risks = parse_risks(payload.get("risks"))
        cfg = parse_config(payload.get("config"), default=config.default_analysis_config())
        overrides: dict = {}
        if rate is not None:
            overrides["interest_rate"] = rate
        if down_payment is not None:
            overrides["down_payment_pct"] = down_payment
        if self_managed is not None:
            overrides["self_managed"] = self_managed
        if auto_maintenance:
            overrides["maintenance_pct"] = suggest_maintenance_pct(prop)
        cfg = parse_config(overrides, default=cfg)
    except MalformedInputError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)

    report = json.dumps(build_report(prop, risks, cfg).to_dict(), indent=2)
    if output is not None:
        output.write_text(report)
        typer.echo(f"wrote {output}")
    else:
        typer.echo(report)


@app.command()
def defaults() -> None:
    """
    Print the investor assumptions used when a payload has no "config".
    """
    typer.echo(config.default_analysis_config().model_dump_json(indent=2))


if __name__ == "__main__":
    app()

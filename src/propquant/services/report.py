from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Sequence

from propquant.adapters.config import config as app_config
from propquant.adapters.logging_utils import get_logger, log_event
from propquant.analysis.finance import calculate_financials
from propquant.analysis.projections import generate_projections
from propquant.analysis.scoring import calculate_institutional_scores
from propquant.analysis.sensitivity import generate_sensitivity
from propquant.domain.assumptions import AnalysisConfig
from propquant.domain.property import PropertyData, RiskFactor
from propquant.domain.underwriting import AnalysisResult
from propquant.services.sanity import run_sanity_checks
from propquant.services.validation import parse_config, parse_property, parse_risks

logger = get_logger(__name__)


def build_report(
    prop: PropertyData,
    risks: Sequence[RiskFactor],
    config: AnalysisConfig | None = None,
) -> AnalysisResult:
    """
    Main analysis entrypoint.

    The calculator runs first; sanity checks, scores, sensitivity and
    projections only read its output and are independent of each other.
    """
    cfg = config if config is not None else app_config.default_analysis_config()

    financials = calculate_financials(prop, cfg)
    sanity = run_sanity_checks(prop, financials)
    scores = calculate_institutional_scores(prop, financials, risks)
    sensitivity = generate_sensitivity(prop, cfg)
    projections = generate_projections(prop, financials)

    result = AnalysisResult(
        id=uuid.uuid4().hex[:12],
        timestamp=datetime.now(timezone.utc).isoformat(),
        property=prop,
        financials=financials,
        risks=tuple(risks),
        sanity_checks=tuple(sanity),
        institutional_scores=scores,
        sensitivity=tuple(sensitivity),
        projections=tuple(projections),
    )

    log_event(
        logger,
        "analysis_completed",
        analysis_id=result.id,
        currency=prop.currency,
        final_score=scores.final_score,
        dscr=round(financials.dscr, 4),
        critical_checks=[c.id for c in sanity if c.severity == "critical"],
    )
    return result


def build_report_from_payload(payload: dict[str, Any]) -> AnalysisResult:
    """
    Parse a raw `{"property": ..., "risks": [...], "config": {...}}` payload
    and analyze it. Raises MalformedInputError on bad input.
    """
    prop = parse_property(payload.get("property"))
    risks = parse_risks(payload.get("risks"))
    cfg = parse_config(payload.get("config"), default=app_config.default_analysis_config())
    return build_report(prop, risks, cfg)

# src/propquant/services/validation.py
from __future__ import annotations

from typing import Any, Iterable

from pydantic import BaseModel, ValidationError

from propquant.adapters.logging_utils import get_logger, log_event
from propquant.domain.assumptions import AnalysisConfig
from propquant.domain.property import PropertyData, RiskFactor

logger = get_logger(__name__)


class MalformedInputError(ValueError):
    """Input missing a required field or holding a value outside its domain."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Malformed input at {field}: {reason}")


def _location(prefix: str, loc: Iterable[Any]) -> str:
    parts = [prefix] + [str(p) for p in loc]
    return ".".join(parts)


def _parse(model: type[BaseModel], raw: Any, prefix: str) -> Any:
    if not isinstance(raw, dict):
        raise MalformedInputError(prefix, f"expected an object, got {type(raw).__name__}")
    try:
        return model.model_validate(raw)
    except ValidationError as err:
        first = err.errors()[0]
        field = _location(prefix, first["loc"])
        log_event(logger, "malformed_input", field=field, error_count=err.error_count())
        raise MalformedInputError(field, first["msg"]) from err


def parse_property(raw: Any) -> PropertyData:
    return _parse(PropertyData, raw, "property")


def parse_risks(raw: Any) -> list[RiskFactor]:
    """The risk assessment step must supply at least one factor."""
    if not isinstance(raw, list):
        raise MalformedInputError("risks", "expected a list of risk factors")
    if not raw:
        raise MalformedInputError("risks", "at least one risk factor is required")
    return [_parse(RiskFactor, item, f"risks.{i}") for i, item in enumerate(raw)]


def parse_config(raw: Any, default: AnalysisConfig) -> AnalysisConfig:
    """
    Missing config means "use the defaults"; a supplied config may override
    any subset of fields and each supplied field is validated.
    """
    if raw is None:
        return default
    if not isinstance(raw, dict):
        raise MalformedInputError("config", f"expected an object, got {type(raw).__name__}")
    merged = default.model_dump() | _snake_keys(raw)
    return _parse(AnalysisConfig, merged, "config")


def _snake_keys(raw: dict[str, Any]) -> dict[str, Any]:
    # callers may send camelCase; normalize so the merge with defaults is key-aligned
    by_alias = {f.alias: name for name, f in AnalysisConfig.model_fields.items() if f.alias}
    return {by_alias.get(k, k): v for k, v in raw.items()}

# src/propquant/api/schemas.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict


# --------------------------------------------
# Analyze
# --------------------------------------------


class AnalyzeRequest(BaseModel):
    """
    Request for /analyze.

    Sections are kept as raw JSON here and validated by services.validation so
    that a malformed field is reported as a 400 naming the field, the same way
    for HTTP and CLI callers.
    """
    model_config = ConfigDict(extra="allow")

    property: Any = None
    risks: Any = None
    config: Any = None


class AnalyzeResponse(BaseModel):
    """
    Response for /analyze: the serialized AnalysisResult.
    Permissive so new result fields do not break the contract.
    """
    model_config = ConfigDict(extra="allow")

    id: str
    timestamp: str


class DefaultsResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    config: dict[str, Any]
    score_bands: list[dict[str, Any]]

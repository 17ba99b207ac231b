# src/propquant/api/http.py
from __future__ import annotations

from dataclasses import asdict

from fastapi import FastAPI, HTTPException

from propquant.adapters.config import config
from propquant.domain.policy import SCORE_BANDS
from propquant.services.report import build_report_from_payload
from propquant.services.validation import MalformedInputError
from .schemas import AnalyzeRequest, AnalyzeResponse, DefaultsResponse

app = FastAPI(title="PropQuant underwriting engine")


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze_endpoint(payload: AnalyzeRequest) -> AnalyzeResponse:
    try:
        result = build_report_from_payload(payload.model_dump())
    except MalformedInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return AnalyzeResponse(**result.to_dict())


@app.get("/config/defaults", response_model=DefaultsResponse)
def config_defaults() -> DefaultsResponse:
    return DefaultsResponse(
        config=config.default_analysis_config().model_dump(),
        score_bands=[asdict(b) for b in SCORE_BANDS],
    )

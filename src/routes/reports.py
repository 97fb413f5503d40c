"""Report endpoints — run an analysis and return the aggregated report."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator

from fastapi import APIRouter, Body, Depends, HTTPException

from harreport.aggregator import report_from_envelope
from harreport.analysis_client import AnalysisClient
from harreport.errors import AnalysisFailure, TransportFailure
from harreport.schemas import AnalysisEnvelope, ReportModel
from harreport.views import ReportView, build_report_view
from src.config import display_tz, settings
from src.schemas.reports import ReportRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


async def get_analysis_client() -> AsyncIterator[AnalysisClient]:
    async with AnalysisClient() as client:
        yield client


def _resort(requested: bool | None) -> bool:
    return settings.resort_rankings if requested is None else requested


def _to_report(envelope: AnalysisEnvelope | dict[str, Any], resort: bool) -> ReportModel:
    try:
        return report_from_envelope(envelope, resort=resort)
    except AnalysisFailure as e:
        logger.warning("Analysis failed: %s", e.message, extra={"status_code": 422})
        raise HTTPException(status_code=422, detail=e.message)


async def _fetch_report(body: ReportRequest | None, client: AnalysisClient) -> ReportModel:
    body = body or ReportRequest()
    file_path = body.file_path or settings.default_file_path
    logger.info("Generating report for %s", file_path, extra={"file_path": file_path})
    try:
        envelope = await client.analyze(file_path)
    except TransportFailure as e:
        logger.warning(
            "Analysis request for %s failed: %s", file_path, e.message,
            extra={"file_path": file_path, "status_code": e.status_code},
        )
        raise HTTPException(status_code=502, detail=e.message)
    return _to_report(envelope, _resort(body.resort))


@router.post("", response_model=ReportModel)
async def create_report(
    body: ReportRequest | None = None,
    client: AnalysisClient = Depends(get_analysis_client),
):
    """Analyze a HAR file via the backend and return the report."""
    return await _fetch_report(body, client)


@router.post("/view", response_model=ReportView)
async def create_report_view(
    body: ReportRequest | None = None,
    client: AnalysisClient = Depends(get_analysis_client),
):
    """Same as ``POST /reports`` but pre-formatted for display."""
    report = await _fetch_report(body, client)
    return build_report_view(report, display_tz())


@router.post("/aggregate", response_model=ReportModel)
async def aggregate_envelope(
    envelope: dict[str, Any] = Body(...),
    resort: bool | None = None,
):
    """Aggregate an analysis response envelope supplied by the caller."""
    return _to_report(envelope, _resort(resort))

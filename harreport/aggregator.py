"""Turn a raw analysis result into a bounded, display-ready report.

Field defaulting policy for the report summary:

    summary.total_requests   <- summary.total_requests                 (0)
    summary.total_errors     <- summary.total_errors                   (0)
    summary.total_patterns   <- path_pattern_analysis.total_patterns   (0)
    summary.success_rate     <- summary.success_rate                   (0)
    summary.error_4xx        <- summary.error_types["4xx"]             (0)
    summary.error_5xx        <- summary.error_types["5xx"]             (0)

A missing leaf (or an explicit null) takes the default in parentheses. A
missing ``summary`` or ``path_pattern_analysis`` object fails the whole
report with ``AnalysisFailure``; there is no degraded report.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from harreport.errors import AnalysisFailure
from harreport.ranking import rank_by, top_n
from harreport.schemas import (
    AnalysisEnvelope,
    AnalysisInfo,
    EndpointMetric,
    PatternAnalysis,
    PatternMetric,
    RawAnalysisResult,
    ReportModel,
    ReportSummary,
)

logger = logging.getLogger(__name__)

TOP_PATTERNS_LIMIT = 5


def _or_zero(value):
    return 0 if value is None else value


def _validation_message(exc: ValidationError, prefix: str) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "payload"
    return f"{prefix}: {location}: {first['msg']}"


def _error_count(pattern: PatternMetric) -> int:
    return _or_zero(pattern.error_4xx_count) + _or_zero(pattern.error_5xx_count)


def _slowest_key(api: EndpointMetric) -> float:
    return _or_zero(api.avg_latency_ms)


def _traffic_key(pattern: PatternMetric) -> int:
    return _or_zero(pattern.total_requests)


def coerce_result(raw: RawAnalysisResult | Mapping[str, Any]) -> RawAnalysisResult:
    """Validate a mapping into a ``RawAnalysisResult``."""
    if isinstance(raw, RawAnalysisResult):
        return raw
    if not isinstance(raw, Mapping):
        raise AnalysisFailure(
            f"Malformed analysis result: expected an object, got {type(raw).__name__}"
        )
    try:
        return RawAnalysisResult.model_validate(raw)
    except ValidationError as exc:
        raise AnalysisFailure(_validation_message(exc, "Malformed analysis result")) from exc


def aggregate(
    raw: RawAnalysisResult | Mapping[str, Any],
    *,
    cached: bool = False,
    resort: bool = False,
) -> ReportModel:
    """Build a ``ReportModel`` from one analysis result.

    Pure: the same input always yields an equal report. With ``resort`` the
    ranked lists are re-sorted by their metric before truncation instead of
    trusting upstream order.
    """
    result = coerce_result(raw)

    if result.summary is None:
        raise AnalysisFailure("Analysis result is missing its summary")
    if result.path_pattern_analysis is None:
        raise AnalysisFailure("Analysis result is missing its path pattern analysis")

    source = result.summary
    patterns = result.path_pattern_analysis
    error_types = source.error_types or {}

    summary = ReportSummary(
        total_requests=_or_zero(source.total_requests),
        total_errors=_or_zero(source.total_errors),
        total_patterns=_or_zero(patterns.total_patterns),
        success_rate=_or_zero(source.success_rate),
        error_4xx=_or_zero(error_types.get("4xx")),
        error_5xx=_or_zero(error_types.get("5xx")),
    )

    slowest_apis = result.slowest_apis or ()
    traffic = patterns.top_ten_traffic_patterns or ()
    errors = patterns.top_ten_error_patterns or ()
    if resort:
        slowest_apis = rank_by(slowest_apis, _slowest_key)
        traffic = rank_by(traffic, _traffic_key)
        errors = rank_by(errors, _error_count)

    report = ReportModel(
        summary=summary,
        slowest_apis=tuple(slowest_apis),
        request_purposes=dict(result.request_purposes or {}),
        pattern_analysis=PatternAnalysis(
            top_patterns_by_requests=tuple(top_n(traffic, TOP_PATTERNS_LIMIT)),
            top_patterns_by_errors=tuple(errors),
        ),
        response_codes=dict(result.response_codes or {}),
        analysis_info=AnalysisInfo(
            file_path=result.file_path,
            timestamp=result.analysis_timestamp,
            cached=bool(cached),
        ),
    )
    logger.debug(
        "Aggregated report for %s: %d requests, %d patterns",
        result.file_path, summary.total_requests, summary.total_patterns,
    )
    return report


def report_from_envelope(
    envelope: AnalysisEnvelope | Mapping[str, Any],
    *,
    resort: bool = False,
) -> ReportModel:
    """Unwrap a backend response envelope and aggregate its data.

    An envelope with ``success: false`` is never aggregated; its ``error``
    text (or the generic fallback) becomes the failure message.
    """
    if not isinstance(envelope, AnalysisEnvelope):
        try:
            envelope = AnalysisEnvelope.model_validate(envelope)
        except ValidationError as exc:
            raise AnalysisFailure(
                _validation_message(exc, "Malformed analysis response")
            ) from exc

    if not envelope.success:
        raise AnalysisFailure(envelope.error)
    if envelope.data is None:
        raise AnalysisFailure(envelope.error or "Analysis returned no data")

    return aggregate(envelope.data, cached=bool(envelope.cached), resort=resort)

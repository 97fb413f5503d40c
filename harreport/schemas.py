"""Pydantic schemas for analysis results and the reports built from them."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_serializer

# Upstream payloads may carry keys this service does not know about; keep them
# so pass-through sections reach the consumer unmodified.
_INPUT_CONFIG = {"extra": "allow", "frozen": True}
_OUTPUT_CONFIG = {"frozen": True}

Timestamp = str | int | float | datetime
# int first so integer metrics are not widened to float
Number = int | float


# --- Analysis backend payloads ---


class UpstreamModel(BaseModel):
    """A payload section that is handed on as received.

    Dumps only the keys the backend actually sent, so defaults filled in for
    absent fields never show up downstream.
    """

    model_config = _INPUT_CONFIG

    @model_serializer(mode="wrap")
    def serialize_received_keys(self, handler):
        data = handler(self)
        received = self.model_fields_set | set(self.model_extra or ())
        return {key: value for key, value in data.items() if key in received}


class EndpointMetric(UpstreamModel):
    endpoint: str
    method: str | None = None
    avg_latency_ms: Number | None = None
    p95_latency_ms: Number | None = None
    requests: int | None = None
    error_rate: Number | None = None


class PatternMetric(UpstreamModel):
    """Aggregate metrics for one URL pattern.

    Traffic lists name the pattern in ``url`` (usually "METHOD /path"),
    error lists in ``pattern``; either may be absent.
    """

    pattern: str | None = None
    url: str | None = None
    method: str | None = None
    total_requests: int | None = 0
    success_rate: Number | None = None
    success_count: int | None = None
    error_4xx_count: int | None = None
    error_5xx_count: int | None = None
    avg_latency_ms: Number | None = None
    max_latency_ms: Number | None = None
    example_urls: tuple[str, ...] | None = ()


class PurposeCategory(UpstreamModel):
    name: str | None = None
    description: str | None = ""
    total_requests: int | None = 0
    examples: tuple[str, ...] | None = ()


class RawSummary(UpstreamModel):
    total_requests: int | None = None
    total_errors: int | None = None
    success_rate: Number | None = None
    error_types: dict[str, int | None] | None = None


class PathPatternAnalysis(UpstreamModel):
    total_patterns: int | None = None
    top_ten_traffic_patterns: tuple[PatternMetric, ...] | None = None
    top_ten_error_patterns: tuple[PatternMetric, ...] | None = None


class RawAnalysisResult(UpstreamModel):
    summary: RawSummary | None = None
    slowest_apis: tuple[EndpointMetric, ...] | None = None
    request_purposes: dict[str, PurposeCategory] | None = None
    path_pattern_analysis: PathPatternAnalysis | None = None
    response_codes: dict[str, int] | None = None
    file_path: str | None = None
    analysis_timestamp: Timestamp | None = None


class AnalysisEnvelope(BaseModel):
    """Response wrapper returned by ``POST /api/analyze``.

    ``data`` is kept unvalidated until the envelope reports success.
    """

    success: bool = False
    data: dict[str, Any] | None = None
    error: str | None = None
    cached: bool | None = None


# --- Report ---


class ReportSummary(BaseModel):
    total_requests: int
    total_errors: int
    total_patterns: int
    success_rate: Number
    error_4xx: int
    error_5xx: int

    model_config = _OUTPUT_CONFIG


class PatternAnalysis(BaseModel):
    top_patterns_by_requests: tuple[PatternMetric, ...] = ()
    top_patterns_by_errors: tuple[PatternMetric, ...] = ()

    model_config = _OUTPUT_CONFIG


class AnalysisInfo(BaseModel):
    file_path: str | None = None
    timestamp: Timestamp | None = None
    cached: bool = False

    model_config = _OUTPUT_CONFIG


class ReportModel(BaseModel):
    summary: ReportSummary
    slowest_apis: tuple[EndpointMetric, ...] = ()
    request_purposes: dict[str, PurposeCategory] = Field(default_factory=dict)
    pattern_analysis: PatternAnalysis = Field(default_factory=PatternAnalysis)
    response_codes: dict[str, int] = Field(default_factory=dict)
    analysis_info: AnalysisInfo = Field(default_factory=AnalysisInfo)

    model_config = _OUTPUT_CONFIG

"""Pre-formatted projection of a report for display surfaces."""

from __future__ import annotations

from datetime import timezone, tzinfo

from pydantic import BaseModel

from harreport.formatting import format_count, format_metric, format_timestamp, method_label
from harreport.ranking import rank_distribution, top_n
from harreport.schemas import EndpointMetric, PatternMetric, PurposeCategory, ReportModel

HIGHLIGHTED_RANKS = 3
ELEVATED_ERROR_RATE_PCT = 5.0
MAX_EXAMPLE_URLS = 2

_VIEW_CONFIG = {"frozen": True}


class SummaryCards(BaseModel):
    total_requests: str
    total_errors: str
    total_resources: str
    success_rate: str
    error_4xx: str
    error_5xx: str

    model_config = _VIEW_CONFIG


class PurposeCard(BaseModel):
    key: str
    name: str
    description: str
    total_requests: str
    examples: tuple[str, ...]

    model_config = _VIEW_CONFIG


class SlowApiRow(BaseModel):
    rank: int
    highlight: bool
    endpoint: str
    method: str
    avg_latency_ms: str
    p95_latency_ms: str
    requests: str
    error_rate: str
    elevated_error_rate: bool

    model_config = _VIEW_CONFIG


class PatternRow(BaseModel):
    method: str
    target: str
    total_requests: str
    success_rate: str
    success_count: str
    error_4xx: str
    error_5xx: str
    avg_latency_ms: str
    max_latency_ms: str
    example_urls: tuple[str, ...]

    model_config = _VIEW_CONFIG


class ResponseCodeRow(BaseModel):
    code: str
    count: str

    model_config = _VIEW_CONFIG


class ReportInfo(BaseModel):
    file_path: str
    generated_at: str
    cached: bool

    model_config = _VIEW_CONFIG


class ReportView(BaseModel):
    summary: SummaryCards
    purposes: tuple[PurposeCard, ...]
    slowest_apis: tuple[SlowApiRow, ...]
    top_patterns_by_requests: tuple[PatternRow, ...]
    top_patterns_by_errors: tuple[PatternRow, ...]
    response_codes: tuple[ResponseCodeRow, ...]
    info: ReportInfo

    model_config = _VIEW_CONFIG


def _purpose_card(key: str, category: PurposeCategory) -> PurposeCard:
    return PurposeCard(
        key=key,
        name=category.name or key,
        description=category.description or "",
        total_requests=format_count(category.total_requests),
        examples=category.examples or (),
    )


def _slow_api_row(rank: int, api: EndpointMetric) -> SlowApiRow:
    error_rate = api.error_rate or 0
    return SlowApiRow(
        rank=rank,
        highlight=rank <= HIGHLIGHTED_RANKS,
        endpoint=api.endpoint,
        method=method_label(api),
        avg_latency_ms=format_metric(api.avg_latency_ms),
        p95_latency_ms=format_metric(api.p95_latency_ms),
        requests=format_metric(api.requests),
        error_rate=format_metric(api.error_rate, "%"),
        elevated_error_rate=error_rate > ELEVATED_ERROR_RATE_PCT,
    )


def _pattern_row(pattern: PatternMetric) -> PatternRow:
    return PatternRow(
        method=method_label(pattern),
        target=pattern.url or pattern.pattern or "",
        total_requests=format_count(pattern.total_requests),
        success_rate=format_metric(pattern.success_rate, "%"),
        success_count=format_metric(pattern.success_count),
        error_4xx=format_count(pattern.error_4xx_count),
        error_5xx=format_count(pattern.error_5xx_count),
        avg_latency_ms=format_metric(pattern.avg_latency_ms, "ms"),
        max_latency_ms=format_metric(pattern.max_latency_ms, "ms"),
        example_urls=tuple(top_n(pattern.example_urls, MAX_EXAMPLE_URLS)),
    )


def build_report_view(report: ReportModel, tz: tzinfo = timezone.utc) -> ReportView:
    """Format every section of ``report`` for display."""
    summary = report.summary
    patterns = report.pattern_analysis
    info = report.analysis_info

    return ReportView(
        summary=SummaryCards(
            total_requests=format_count(summary.total_requests),
            total_errors=format_count(summary.total_errors),
            total_resources=format_count(summary.total_patterns),
            success_rate=format_metric(summary.success_rate),
            error_4xx=format_count(summary.error_4xx),
            error_5xx=format_count(summary.error_5xx),
        ),
        purposes=tuple(
            _purpose_card(key, category)
            for key, category in report.request_purposes.items()
        ),
        slowest_apis=tuple(
            _slow_api_row(rank, api)
            for rank, api in enumerate(report.slowest_apis, start=1)
        ),
        top_patterns_by_requests=tuple(
            _pattern_row(p) for p in patterns.top_patterns_by_requests
        ),
        top_patterns_by_errors=tuple(
            _pattern_row(p) for p in patterns.top_patterns_by_errors
        ),
        response_codes=tuple(
            ResponseCodeRow(code=code, count=format_count(count))
            for code, count in rank_distribution(report.response_codes)
        ),
        info=ReportInfo(
            file_path=info.file_path or "",
            generated_at=format_timestamp(info.timestamp, tz),
            cached=info.cached,
        ),
    )

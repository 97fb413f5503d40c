"""Entry point: python -m harreport

Builds a performance report for a HAR file from the analysis backend's
results and prints it.

Usage:
    python -m harreport                       # Analyze the default file (trace.har)
    python -m harreport path/to/trace.har     # Analyze a specific file
    python -m harreport --input saved.json    # Report on a saved analysis response
    python -m harreport --json                # Print the report model as JSON
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from harreport.aggregator import report_from_envelope
from harreport.analysis_client import AnalysisClient
from harreport.errors import ReportError
from harreport.loader import load_analysis
from harreport.schemas import AnalysisEnvelope, ReportModel
from harreport.views import ReportView, build_report_view
from src.config import display_tz, settings
from src.log_config import configure_logging

logger = logging.getLogger(__name__)


def print_report(view: ReportView) -> None:
    print("=" * 60)
    print("HAR ANALYSIS REPORT")
    print("=" * 60)

    s = view.summary
    print("\n--- Executive summary ---")
    print(f"  Total requests:   {s.total_requests}")
    print(f"  Total errors:     {s.total_errors}")
    print(f"  Total resources:  {s.total_resources}")
    print(f"  Success rate (%): {s.success_rate}")
    print(f"  4xx errors:       {s.error_4xx}")
    print(f"  5xx errors:       {s.error_5xx}")

    print("\n--- Request purposes ---")
    if not view.purposes:
        print("  No request purpose data available")
    for card in view.purposes:
        print(f"  {card.name}: {card.total_requests} request(s)")
        if card.description:
            print(f"    {card.description}")
        for example in card.examples:
            print(f"    - {example}")

    print("\n--- Slowest APIs ---")
    if not view.slowest_apis:
        print("  No APIs found")
    for row in view.slowest_apis:
        flag = " !" if row.elevated_error_rate else ""
        print(
            f"  #{row.rank:<3} {row.method:<7} {row.endpoint}  "
            f"avg={row.avg_latency_ms}ms p95={row.p95_latency_ms}ms "
            f"requests={row.requests} errors={row.error_rate}{flag}"
        )

    for title, rows, empty in (
        ("Top patterns by request volume", view.top_patterns_by_requests, "No traffic patterns found"),
        ("Top patterns by error count", view.top_patterns_by_errors, "No error patterns found"),
    ):
        print(f"\n--- {title} ---")
        if not rows:
            print(f"  {empty}")
        for row in rows:
            print(f"  {row.method} {row.target}")
            print(
                f"    requests={row.total_requests} success={row.success_rate} "
                f"4xx={row.error_4xx} 5xx={row.error_5xx} "
                f"avg={row.avg_latency_ms} max={row.max_latency_ms}"
            )
            for url in row.example_urls:
                print(f"    e.g. {url}")

    print("\n--- Response codes ---")
    for row in view.response_codes:
        print(f"  {row.code}: {row.count} response(s)")

    print("\n--- Report information ---")
    print(f"  File:         {view.info.file_path}")
    print(f"  Generated at: {view.info.generated_at}")
    if view.info.cached:
        print("  (served from analysis cache)")
    print("=" * 60)


async def fetch_envelope(file_path: str | None) -> AnalysisEnvelope:
    async with AnalysisClient() as client:
        return await client.analyze(file_path)


async def build_report(
    file_path: str | None = None,
    input_path: str | None = None,
    resort: bool = False,
) -> ReportModel:
    """Fetch (or load) one analysis and aggregate it into a report."""
    if input_path:
        envelope = load_analysis(input_path)
    else:
        envelope = await fetch_envelope(file_path)
    return report_from_envelope(envelope, resort=resort)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="harreport",
        description="Build a performance report from a HAR traffic analysis",
    )
    parser.add_argument(
        "file_path", nargs="?", default=None,
        help=f"HAR file for the analysis backend (default: {settings.default_file_path})",
    )
    parser.add_argument("--input", dest="input_path", help="Saved analysis response (JSON or YAML)")
    parser.add_argument("--json", action="store_true", help="Print the report model as JSON")
    parser.add_argument(
        "--resort", action="store_true", default=settings.resort_rankings,
        help="Re-sort ranked lists by their metric instead of trusting upstream order",
    )
    args = parser.parse_args(argv)

    configure_logging(log_format=settings.log_format, debug=settings.debug)

    try:
        report = asyncio.run(build_report(args.file_path, args.input_path, args.resort))
    except ReportError as e:
        logger.debug("Report failed", exc_info=True)
        print(f"ERROR: {e.message}")
        return 1
    except OSError as e:
        print(f"ERROR: {e}")
        return 1

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print_report(build_report_view(report, display_tz()))
    return 0


if __name__ == "__main__":
    sys.exit(main())

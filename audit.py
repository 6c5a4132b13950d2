#!/usr/bin/env python3
"""
Website Audit Tool - Agent Panel

Runs one audit from the command line: fetches the page, runs the six
analysis agents concurrently and prints the scored summary.

Usage:
    python audit.py --url example.com [--social https://x.com/acme] [--output report.json] [--verbose]
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from orchestrator.context_store import AuditRequest
from orchestrator.orchestrator import Orchestrator, AuditResponse
from storage import InMemoryRecordStore, SQLRecordStore
from utils.config import AuditConfig, load_env_file
from utils.errors import ConfigError, InputError, PersistenceError

logger = logging.getLogger(__name__)


async def run_audit_pipeline(request: AuditRequest, config: AuditConfig, persist: bool = True,
                             progress_callback=None) -> AuditResponse:
    """
    Core audit pipeline usable by both CLI and Streamlit.

    The URL is validated before any record store is opened.

    Args:
        request: Website URL plus optional social profile and email
        config: Pipeline configuration
        persist: Write the record to DATABASE_URL instead of memory
        progress_callback: Optional callback(phase, status, detail) for progress updates
    """
    request.normalized_url()
    store = SQLRecordStore(config.database_url) if persist else InMemoryRecordStore()
    orchestrator = Orchestrator(config, store, progress_callback=progress_callback)
    return await orchestrator.run_audit(request)


def print_summary(result: AuditResponse):
    report = result.report
    print(f"\n{'='*60}")
    print(f"  AUDIT COMPLETE")
    print(f"{'='*60}")
    print(f"\nAudit ID: {result.id} ({result.status})")
    print(f"Website: {report.website_url}")
    if report.extracted_page is not None and report.extracted_page.degraded:
        print("Warning: the website could not be loaded; results are generic.")
    print(f"\nOverall Score: {report.overall_score}/100 ({report.band.value})")

    print(f"\nAgent Scores:")
    for name, agent_result in report.agents.items():
        print(f"  - {name}: {agent_result.score}/100")

    print(f"\nTop Recommendations:")
    for i, rec in enumerate(report.top_recommendations, 1):
        print(f"  {i}. {rec}")


def main():
    parser = argparse.ArgumentParser(
        description='Website Audit Tool - six-agent website analysis'
    )
    parser.add_argument('--url', '-u', required=True, help='Website URL to audit (bare domains are accepted)')
    parser.add_argument('--social', '-s', help='Optional social profile URL')
    parser.add_argument('--email', '-e', help='Optional contact email stored with the record')
    parser.add_argument('--output', '-o', help='Write the full report as JSON to this path')
    parser.add_argument('--no-store', action='store_true', help='Keep the audit record in memory only')
    parser.add_argument('--scoring', choices=['mean', 'weighted'], help='Override SCORING_MODE')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')

    args = parser.parse_args()

    load_env_file()
    try:
        config = AuditConfig.from_env()
    except ConfigError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    if args.scoring:
        config.scoring_mode = args.scoring

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    request = AuditRequest(website_url=args.url, social_url=args.social, email=args.email)

    try:
        result = asyncio.run(run_audit_pipeline(request, config, persist=not args.no_store))
    except InputError as e:
        print(f"Error: {e}")
        sys.exit(2)
    except PersistenceError as e:
        print(f"Error: could not create audit record: {e}")
        sys.exit(1)

    print_summary(result)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"id": result.id, "status": result.status, **result.report.to_dict()}
        output_path.write_text(json.dumps(payload, indent=2), encoding='utf-8')
        print(f"\nReport saved to: {output_path}")


if __name__ == "__main__":
    main()

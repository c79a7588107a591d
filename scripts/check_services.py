#!/usr/bin/env python3
"""
Service check script.

Tests the Redis connection and lists which providers have API keys.
Pass a run id to print that run's persisted report status and token usage.

    python scripts/check_services.py [run_id]
"""

import sys
import logging
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.database import test_connections, get_redis_client, close_connections
from config.settings import settings
from src.controllers.cache_manager import get_report
from utils.cost_tracker import load_cost_records, summarize_costs

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def print_run(run_id: str) -> None:
    """Print the stored report summary and token usage for one run."""
    print(f"📄 Run {run_id}")
    print("-" * 60)

    report = get_report(run_id)
    if report:
        print(f"Status: {report['status']}")
        print(f"Queries: {report['total_queries']}, results: {report['total_results']}, "
              f"recognized: {report['recognized']}")
        print(f"Overall recognition: {report['analysis']['overall_recognition']}%")
    else:
        print("No report stored for this run")

    totals = summarize_costs(load_cost_records(run_id, get_redis_client()))
    for model, entry in totals.items():
        print(f"{model}: {entry['calls']} calls, {entry['input_tokens']} in / {entry['output_tokens']} out")
    print()


def main():
    """Check backing services and provider configuration."""

    print("=" * 60)
    print("Service Check")
    print("=" * 60)
    print()

    status = test_connections()

    if status["redis"]["connected"]:
        print("✅ Redis: Connected")
    else:
        print(f"❌ Redis: Failed - {status['redis']['error']}")
        print(f"   Make sure Redis is running at {settings.REDIS_HOST}:{settings.REDIS_PORT}")

    print()
    print("🔑 Provider API keys:")
    print("-" * 60)
    for name, key in (
        ("chatgpt", settings.OPENAI_API_KEY),
        ("claude", settings.ANTHROPIC_API_KEY),
        ("gemini", settings.GEMINI_API_KEY),
        ("perplexity", settings.PERPLEXITY_API_KEY),
        ("tavily (claude search)", settings.TAVILY_API_KEY),
    ):
        print(f"{'✅' if key else '❌'} {name}")
    print()

    if len(sys.argv) > 1:
        if not status["redis"]["connected"]:
            print("❌ Cannot read run data - fix the Redis connection first")
            sys.exit(1)
        print_run(sys.argv[1])

    # Cleanup
    close_connections()

    if not status["redis"]["connected"]:
        sys.exit(1)


if __name__ == "__main__":
    main()

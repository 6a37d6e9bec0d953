"""Job Match — CLI entrypoint."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging to both console and log file."""
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    run_date = datetime.now().strftime("%Y-%m-%d")
    log_file = log_dir / f"run_{run_date}.log"

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def print_result(result) -> None:
    """Plain-text listing of each category."""
    print(f"Status: {result.status.value}  "
          f"(sources: {', '.join(s.value for s in result.sources) or 'none'}, "
          f"provider: {result.provider_status.value})")

    if not result.has_results:
        print("\nNo matching jobs. See the job search guide for direct career pages.")
        return

    for category, jobs in result.categories.items():
        print(f"\n## {category.value} ({len(jobs)})")
        for s in jobs:
            print(f"  {s.score * 100:5.1f}%  {s.job.title} — {s.job.company} [{s.job.location_type.value}]")
            print(f"          {s.job.application_url}")
            if s.reasoning:
                print(f"          {'; '.join(s.reasoning)}")


def main() -> None:
    """Main CLI entrypoint for job recommendations."""
    parser = argparse.ArgumentParser(
        description="Job Match — ranked, explained job recommendations for a candidate profile",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                # profile.md + curated data + sources.yaml
  python main.py --location remote --salary 100k-150k
  python main.py --offline --json               # curated corpus only, JSON output
        """,
    )
    parser.add_argument("--profile", default="profile.md", help="Path to profile file. Default: profile.md")
    parser.add_argument("--sources", default=None, help="Path to sources config file. Default: sources.yaml")
    parser.add_argument("--data", default=None, help="Curated dataset (YAML or JSON). Default: data/curated_jobs.yaml")
    parser.add_argument("--weights", default=None, help="Optional YAML file of scoring weights")
    parser.add_argument("--location", choices=["any", "remote", "onsite"], default=None, help="Location filter")
    parser.add_argument(
        "--experience", choices=["any", "entry", "mid", "senior"], default=None, help="Experience filter"
    )
    parser.add_argument(
        "--salary", choices=["any", "under100k", "100k-150k", "over150k"], default=None, help="Salary filter"
    )
    parser.add_argument("--timeout", type=float, default=None, help="Remote provider timeout in seconds")
    parser.add_argument("--offline", action="store_true", help="Skip the remote provider")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--log-level", default=None, help="Log level override (DEBUG, INFO, WARNING, ERROR)")

    args = parser.parse_args()

    # Load environment variables
    load_dotenv()

    log_level = args.log_level or os.getenv("LOG_LEVEL", "INFO")
    setup_logging(log_level)
    logger = logging.getLogger("jobmatch")

    from jobmatch.agents.profile_parser import parse_filters, parse_profile
    from jobmatch.agents.scoring import load_weights
    from jobmatch.errors import InvalidProfile
    from jobmatch.graph import recommend
    from jobmatch.models.profile import load_filters
    from jobmatch.storage.store import JobRecordStore
    from jobmatch.tools.sources import build_provider, load_provider_config

    data_path = args.data or os.getenv("CURATED_DATA_PATH", "data/curated_jobs.yaml")
    sources_path = args.sources or os.getenv("SOURCES_PATH", "sources.yaml")

    try:
        timeout = args.timeout if args.timeout is not None else float(os.getenv("REMOTE_TIMEOUT_SECS", "4"))
        profile = parse_profile(args.profile)
        overrides = {
            "location": args.location,
            "experience": args.experience,
            "salary": args.salary,
        }
        filters = load_filters({
            **parse_filters(args.profile).model_dump(mode="json"),
            **{k: v for k, v in overrides.items() if v is not None},
        })

        store = JobRecordStore.from_file(data_path)
        provider_config = None if args.offline else load_provider_config(sources_path)
        provider = build_provider(provider_config)
        keywords = tuple((provider_config or {}).get("keywords", []) or ())
        weights = load_weights(args.weights) if args.weights else None

        result = recommend(
            profile,
            filters,
            store=store,
            provider=provider,
            weights=weights,
            timeout_secs=timeout,
            keywords=keywords,
        )
    except InvalidProfile as e:
        logger.error("Invalid profile: %s", e)
        sys.exit(2)
    except Exception as e:
        logger.error("Recommendation failed: %s", e, exc_info=True)
        sys.exit(1)

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print_result(result)


if __name__ == "__main__":
    main()

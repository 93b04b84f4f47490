"""
Offer Scout — incremental compensation offer ingestion.
CLI entry point for running the ingestion workflow.
"""

import argparse
import sys
import os
import time
from datetime import datetime, timezone

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config.settings import Settings, settings as default_settings
from graph.context import build_context
from graph.workflow import run_pipeline
from models.summary import RunSummary
from tools.file_handler import generate_summary, save_to_csv
from tools.offer_store import read_published_offers


def run(settings: Settings = None, force_full: bool = False) -> RunSummary:
    """Run one incremental ingestion and return its summary."""
    settings = settings or default_settings
    context = build_context(settings, force_full=force_full)
    return run_pipeline(context)


def _report(settings: Settings, csv_path: str = None) -> None:
    offers = read_published_offers(settings)
    print(f"\n{generate_summary(offers)}")
    if csv_path:
        print(f"📄 CSV: {save_to_csv(offers, csv_path)}")


def main():
    """Main entry point for the ingestion pipeline."""
    parser = argparse.ArgumentParser(
        description="Offer Scout — incremental compensation offer ingestion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py
  python run.py --output-dir public/
  python run.py --full --max-calls 50
  python run.py --schedule 1440 --csv output/offers.csv
        """,
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help=f"Directory for the local dataset copy (default: {default_settings.output_dir})",
    )
    parser.add_argument(
        "--max-calls",
        type=int,
        default=None,
        help=f"LLM call budget for this run (default: {default_settings.daily_call_budget})",
    )
    parser.add_argument(
        "--full",
        action="store_true",
        help="Ignore the saved checkpoint and fetch in full mode",
    )
    parser.add_argument(
        "--csv",
        type=str,
        default=None,
        metavar="PATH",
        help="Also export the merged dataset to a CSV file",
    )
    parser.add_argument(
        "--schedule",
        type=int,
        default=None,
        metavar="MINUTES",
        help="Run on a schedule every N minutes (e.g. --schedule 1440).",
    )

    args = parser.parse_args()

    # Update settings
    settings = default_settings
    if args.output_dir:
        settings.output_dir = args.output_dir
    if args.max_calls is not None:
        settings.daily_call_budget = args.max_calls

    if not settings.llm_api_key:
        print("❌ LLM_API_KEY must be set in .env to extract offers.")
        sys.exit(1)

    print("=" * 60)
    print("  💰 Offer Scout — Compensation Ingestion")
    print("=" * 60)
    print(f"  LLM:    {settings.llm_model_name} @ {settings.llm_base_url}")
    print(f"  Output: {settings.resolved_output_dir}/{settings.dataset_filename}")
    print(f"  Gist:   {settings.gist_id or 'not configured'}")
    print(f"  Budget: {settings.daily_call_budget} LLM calls per run")
    if args.schedule:
        print(f"  Mode:   ⏰ Scheduled every {args.schedule} min")
    print("=" * 60)
    print()

    # ── Scheduled mode ───────────────────────────────────────
    if args.schedule:
        interval = args.schedule
        print(f"⏰ Starting scheduler — running every {interval} minutes")
        print(f"   Press Ctrl+C to stop.\n")

        cycle = 0
        while True:
            cycle += 1
            now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
            print(f"\n{'─' * 60}")
            print(f"  Cycle #{cycle} — {now}")
            print(f"{'─' * 60}\n")

            try:
                summary = run(settings, force_full=args.full and cycle == 1)
                print(f"\n📊 Results: {summary.new_offers} new, {summary.total_offers} total")
                _report(settings, args.csv)
            except KeyboardInterrupt:
                raise
            except Exception as e:
                print(f"❌ Cycle #{cycle} failed: {e}")

            print(f"\n💤 Sleeping {interval} minutes until next run...")
            try:
                time.sleep(interval * 60)
            except KeyboardInterrupt:
                print("\n\n⛔ Scheduler stopped.")
                sys.exit(0)

    # ── Single run mode ──────────────────────────────────────
    else:
        try:
            summary = run(settings, force_full=args.full)
            if summary.stop_reason:
                print(f"\n⚠️  Run stopped early ({summary.stop_reason}); remaining posts wait for the next run.")
            _report(settings, args.csv)

        except KeyboardInterrupt:
            print("\n\n⛔ Ingestion interrupted by user.")
            sys.exit(1)
        except Exception as e:
            print(f"\n❌ Fatal error: {e}")
            raise


if __name__ == "__main__":
    main()

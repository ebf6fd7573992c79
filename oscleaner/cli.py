"""
Command-line interface for the index cleaner.

Runs a cleanup cycle, shows what would be deleted, prints the configured
rules, or starts the daily scheduler.
"""

import argparse
import asyncio
import logging
import sys
from datetime import date, datetime
from typing import List, Optional

from oscleaner.config.rules_config import RulesConfigError, RulesConfigManager
from oscleaner.config.settings import CleanerSettings, load_settings
from oscleaner.connectors.factory import ClusterClientFactory
from oscleaner.monitoring.cleanup_metrics import CleanupMetrics
from oscleaner.retention.manager import create_cleanup_manager
from oscleaner.retention.scheduler import create_cleanup_scheduler
from oscleaner.retention.summary import format_size


def setup_logging(level: str = "INFO", verbose: bool = False):
    """Setup logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")


def _create_client(settings: CleanerSettings, args):
    if getattr(args, 'offline', None):
        return ClusterClientFactory.create_client("memory", args.offline)
    return ClusterClientFactory.create_client("aiven", settings)


async def run_cleanup(args, settings: CleanerSettings) -> int:
    """Run one cleanup cycle."""
    client = _create_client(settings, args)
    async with client:
        manager = create_cleanup_manager(settings, client)
        result = await manager.run_cleanup(today=args.date, dry_run=args.dry_run or None)

    print(f"\nCleanup completed for {len(result.services)} services (dry_run={result.dry_run})")
    for service_result in result.services:
        status_icon = "✗" if service_result.has_failures else "✓"
        print(f"{status_icon} {service_result.message}")
        for deletion in service_result.deletes:
            mark = "deleted" if deletion.success else f"FAILED ({deletion.error})"
            print(f"    {deletion.name}: {format_size(deletion.size_bytes)} {mark}")

    print(f"Total deleted: {format_size(result.total_deleted_bytes)}")
    if result.notification_sent is False:
        print("Notification was not delivered")

    return 1 if not result.succeeded else 0


async def show_plan(args, settings: CleanerSettings) -> int:
    """Show what a cleanup would delete, without deleting."""
    client = _create_client(settings, args)
    async with client:
        manager = create_cleanup_manager(settings, client)
        run = await manager.plan(today=args.date)

    print(f"Deletion plan for {run.run_date}")
    print("=" * 40)
    for service in run.services:
        if service in run.failures:
            print(f"\n{service}: FAILED to list indices ({run.failures[service]})")
            continue

        plan = run.deletions[service]
        print(f"\n{service}: {len(plan)} indices, {format_size(plan.total_bytes)}")
        for entry in plan.entries:
            print(f"  - {entry.name} ({format_size(entry.size_bytes)})")

        summary = run.summary.get(service, {})
        if summary:
            print("  Summary (pre-cleanup):")
            for name, total in summary.items():
                print(f"    {name}: {format_size(total)}")

    return 1 if run.failures else 0


def show_rules(args, settings: CleanerSettings) -> int:
    """Print the configured rules."""
    services = RulesConfigManager(settings.rules_file).services

    print("Index Cleanup Rules")
    print("=" * 50)
    for service_rules in services:
        print(f"\n{service_rules.service}")
        for rule in service_rules.rules:
            print(f"  {rule.index_pattern}: older than {rule.age_threshold} days "
                  f"(date pattern {rule.date_pattern})")
        for spec in service_rules.summary_reports:
            print(f"  summary '{spec.name}': {spec.pattern}")
    return 0


async def run_scheduler(args, settings: CleanerSettings) -> int:
    """Run the daily scheduler until interrupted."""
    metrics = CleanupMetrics()
    if settings.metrics_port:
        metrics.serve(settings.metrics_port)

    client = _create_client(settings, args)
    async with client:
        manager = create_cleanup_manager(settings, client, metrics=metrics)
        scheduler = create_cleanup_scheduler(manager, settings.cleanup_schedule, settings.check_interval_minutes)
        await scheduler.run_forever()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="oscleaner", description="OpenSearch index cleaner")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--env-file", help="Path to a .env file")
    parser.add_argument("--rules", help="Rules file (overrides RULES_FILE)")

    # also accepted after the subcommand; SUPPRESS keeps a value given before it
    rules_option = argparse.ArgumentParser(add_help=False)
    rules_option.add_argument("--rules", default=argparse.SUPPRESS, help="Rules file (overrides RULES_FILE)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", parents=[rules_option], help="Run one cleanup cycle")
    run_parser.add_argument("--dry-run", action="store_true", help="Log deletions without executing them")
    run_parser.add_argument("--date", type=_parse_date, help="Reference date (YYYY-MM-DD, default: today UTC)")
    run_parser.add_argument("--offline", metavar="LISTING", help="Use a JSON index listing instead of the API")

    plan_parser = subparsers.add_parser("plan", parents=[rules_option], help="Show the deletion plan without deleting")
    plan_parser.add_argument("--date", type=_parse_date, help="Reference date (YYYY-MM-DD, default: today UTC)")
    plan_parser.add_argument("--offline", metavar="LISTING", help="Use a JSON index listing instead of the API")

    subparsers.add_parser("rules", parents=[rules_option], help="Show the configured rules")

    schedule_parser = subparsers.add_parser("schedule", parents=[rules_option], help="Run the daily cleanup scheduler")
    schedule_parser.add_argument("--offline", metavar="LISTING", help="Use a JSON index listing instead of the API")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.env_file, rules_file=args.rules)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.log_level, args.verbose)
    logger = logging.getLogger(__name__)

    try:
        if args.command == "run":
            return asyncio.run(run_cleanup(args, settings))
        elif args.command == "plan":
            return asyncio.run(show_plan(args, settings))
        elif args.command == "rules":
            return show_rules(args, settings)
        elif args.command == "schedule":
            return asyncio.run(run_scheduler(args, settings))
    except (RulesConfigError, ValueError, OSError) as e:
        logger.error(f"Cleanup process failed with error: {e}")
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

"""Command-line entry point for the eMirimo matching service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import signal
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from emirimo.config.environment import EnvironmentConfig
from emirimo.config.exceptions import ConfigurationError
from emirimo.config.loader import load_config
from emirimo.config.models import AppConfig
from emirimo.events.bus import EventBus
from emirimo.events.events import JobActivated, JobPosted
from emirimo.jobs.service import JobPostingService
from emirimo.logging import get_logger
from emirimo.logging.config import configure_logging
from emirimo.logging.context import log_context
from emirimo.matching.engine import MatchEngine
from emirimo.matching.ranker import RecommendationRanker
from emirimo.notifications.notifier import NullNotifier
from emirimo.notifications.service import NotificationService
from emirimo.persistence.database import close_database, init_database
from emirimo.persistence.stores import (
    SqlAlertStore,
    SqlJobStore,
    SqlNotificationStore,
    SqlProfileStore,
)
from emirimo.recommendations.exceptions import RecommendationError
from emirimo.recommendations.service import RecommendationService
from emirimo.scheduler import SchedulerService
from emirimo.seed import SeedDataError, load_seed_file

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


@dataclass
class Services:
    """Everything a command needs, wired once per process."""

    profile_store: SqlProfileStore
    job_store: SqlJobStore
    event_bus: EventBus
    ranker: RecommendationRanker
    recommendations: RecommendationService
    notifications: NotificationService
    jobs: JobPostingService


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_services(
    app_config: AppConfig, env_config: EnvironmentConfig, notifier=None
) -> Services:
    """Wire stores, engine, ranker and services; subscribe fan-out to job events."""
    profile_store = SqlProfileStore()
    job_store = SqlJobStore()
    engine = MatchEngine()
    ranker = RecommendationRanker(
        profile_store,
        job_store,
        engine,
        default_limit=app_config.matching.default_limit,
        max_workers=app_config.matching.max_workers,
    )

    notification_service = NotificationService(
        profile_store=profile_store,
        job_store=job_store,
        notification_store=SqlNotificationStore(),
        alert_store=SqlAlertStore(),
        env_config=env_config,
        notifications_config=app_config.notifications,
        email_config=app_config.email,
        engine=engine,
        ranker=ranker,
        notifier=notifier or NullNotifier(),
    )

    event_bus = EventBus()
    event_bus.subscribe(JobPosted, notification_service.handle_job_event)
    event_bus.subscribe(JobActivated, notification_service.handle_job_event)

    return Services(
        profile_store=profile_store,
        job_store=job_store,
        event_bus=event_bus,
        ranker=ranker,
        recommendations=RecommendationService(
            profile_store,
            job_store,
            engine=engine,
            ranker=ranker,
            default_limit=app_config.matching.default_limit,
        ),
        notifications=notification_service,
        jobs=JobPostingService(job_store, event_bus),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emirimo",
        description="eMirimo job matching - recommendations, candidate ranking and job alerts",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    load_data = subparsers.add_parser("load-data", help="Load seekers and jobs from a YAML file")
    load_data.add_argument("file", type=Path, help="YAML data file")
    load_data.add_argument(
        "--notify",
        action="store_true",
        help="Send job recommendations for newly added active jobs",
    )

    recommend = subparsers.add_parser("recommend", help="Show job recommendations for a seeker")
    recommend.add_argument("seeker_id")
    recommend.add_argument("--limit", type=int, default=None)

    match = subparsers.add_parser("match", help="Show the match between a seeker and a job")
    match.add_argument("seeker_id")
    match.add_argument("job_id")

    candidates = subparsers.add_parser("candidates", help="Show the best candidates for a job")
    candidates.add_argument("job_id")
    candidates.add_argument("--limit", type=int, default=None)

    notify_job = subparsers.add_parser("notify-job", help="Send recommendations for one job")
    notify_job.add_argument("job_id")

    subparsers.add_parser("digest", help="Send the weekly job digest now")
    subparsers.add_parser("reminders", help="Send application reminders now")
    subparsers.add_parser("schedule", help="Run digest and reminder batches on their schedules")

    return parser


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, default=str))


def cmd_load_data(args, services: Services) -> int:
    data = load_seed_file(args.file)

    for seeker in data.seekers:
        services.profile_store.upsert(seeker)

    for job in data.jobs:
        services.jobs.create_job(job, publish=args.notify)

    logger.info(
        f"Loaded {len(data.seekers)} seekers and {len(data.jobs)} jobs from {args.file}",
        extra={
            "event": "data.loaded",
            "seeker_count": len(data.seekers),
            "job_count": len(data.jobs),
            "notify": args.notify,
        },
    )
    _print_json({"seekers": len(data.seekers), "jobs": len(data.jobs)})
    return EXIT_OK


def cmd_recommend(args, services: Services) -> int:
    _print_json(services.recommendations.get_job_recommendations(args.seeker_id, args.limit))
    return EXIT_OK


def cmd_match(args, services: Services) -> int:
    try:
        _print_json(services.recommendations.get_job_match(args.seeker_id, args.job_id))
    except RecommendationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    return EXIT_OK


def cmd_candidates(args, services: Services) -> int:
    _print_json(services.recommendations.get_top_candidates(args.job_id, args.limit))
    return EXIT_OK


def cmd_notify_job(args, services: Services) -> int:
    _print_json(services.notifications.notify_job_posted(args.job_id).to_dict())
    return EXIT_OK


def cmd_digest(args, services: Services) -> int:
    _print_json(services.notifications.send_weekly_digest().to_dict())
    return EXIT_OK


def cmd_reminders(args, services: Services) -> int:
    _print_json(services.notifications.send_application_reminders().to_dict())
    return EXIT_OK


def cmd_schedule(args, services: Services, app_config: AppConfig) -> int:
    shutdown_event = threading.Event()
    scheduler_service = SchedulerService(
        schedule_config=app_config.schedule,
        digest_callable=services.notifications.send_weekly_digest,
        reminder_callable=services.notifications.send_application_reminders,
        shutdown_event=shutdown_event,
    )

    def signal_handler(signum, frame):
        logger.info(
            f"Received signal {signum}, shutting down",
            extra={"event": "service.signal_received", "signal": signum},
        )
        scheduler_service.shutdown(wait=False)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    scheduler_service.start()
    logger.info("Scheduler started. Press Ctrl+C to stop", extra={"event": "service.daemon_mode.started"})

    try:
        shutdown_event.wait()
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received, shutting down", extra={"event": "service.keyboard_interrupt"})
        scheduler_service.shutdown(wait=False)

    return EXIT_OK


COMMANDS = {
    "load-data": cmd_load_data,
    "recommend": cmd_recommend,
    "match": cmd_match,
    "candidates": cmd_candidates,
    "notify-job": cmd_notify_job,
    "digest": cmd_digest,
    "reminders": cmd_reminders,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code: 0 success, 1 configuration or fatal error, 2 not found (match)
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        # Step 1: Load configuration before logging so the format is known
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        # Step 2: Configure logging
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        logger.info(
            "eMirimo starting",
            extra={
                "event": "service.starting",
                "command": args.command,
                "log_level": env_config.log_level,
                "email_enabled": env_config.email_enabled,
            },
        )

        # Step 3: Database and services
        init_database(env_config.database_url)
        services = build_services(app_config, env_config)

        # Step 4: Run the command
        with log_context(command=args.command):
            if args.command == "schedule":
                exit_code = cmd_schedule(args, services, app_config)
            else:
                exit_code = COMMANDS[args.command](args, services)

        close_database()
        logger.info(
            "eMirimo stopped",
            extra={
                "event": "service.stopping",
                "exit_code": exit_code,
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return EXIT_ERROR
    except SeedDataError as e:
        print(f"Data Error: {e}", file=sys.stderr)
        close_database()
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        close_database()
        return EXIT_OK
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={
                "event": "service.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        close_database()
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())

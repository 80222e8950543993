"""Main entry point for escalator."""

import asyncio
import logging
import sys
from pathlib import Path

from escalator.agents import ClaudeReasoningClient, FixerAgent, InvestigatorAgent
from escalator.config import Settings
from escalator.escalation import HealthEvaluator
from escalator.orchestrator import WatchdogService
from escalator.tools import McpService
from escalator.utils import Scheduler


def setup_logging(log_level: str = "INFO", log_file: Path = Path("logs/escalator.log")) -> logging.Logger:
    """Set up logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: File receiving a copy of the console output

    Returns:
        Configured logger instance
    """
    log_level = log_level.upper()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Set up root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # File handler
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(log_level)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    # Formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    # Add handlers
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    return logging.getLogger(__name__)


def build_watchdog(settings: Settings, mcp_service: McpService) -> WatchdogService:
    """Wire the watchdog and its tiers from settings."""
    reasoning_client = ClaudeReasoningClient(settings)
    return WatchdogService(
        settings=settings,
        mcp_service=mcp_service,
        health_evaluator=HealthEvaluator(threshold=settings.health_threshold),
        investigator=InvestigatorAgent(reasoning_client, mcp_service, settings),
        fixer=FixerAgent(reasoning_client, mcp_service, settings),
    )


async def main() -> None:
    """Main entry point."""
    # Load settings
    try:
        settings = Settings()
        settings.validate_all()
    except Exception as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    # Set up logging
    logger = setup_logging(settings.log_level, settings.log_file)
    logger.info("🚀 Escalator starting...")
    logger.info(
        f"Target: {settings.target_resource} ({settings.resource_group}), "
        f"threshold {settings.health_threshold}, every {settings.polling_interval_seconds}s"
    )

    mcp_service = McpService()
    watchdog = build_watchdog(settings, mcp_service)

    scheduler = Scheduler(interval_seconds=settings.polling_interval_seconds)
    scheduler.schedule_job(watchdog.run_cycle, job_name="watchdog")

    try:
        await scheduler.run_forever()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    finally:
        await mcp_service.aclose()
        logger.info(f"Escalator stopped: {watchdog.get_status_summary()}")


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()

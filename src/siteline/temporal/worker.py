"""
Temporal Worker - Separate process from API.

Run with:
    python -m src.siteline.temporal.worker

When DEADLINE_REMINDER_SCHEDULE is set, the worker also makes sure the
cron-scheduled reminder workflow exists.
"""

import asyncio

import uvicorn
from fastapi import FastAPI
from temporalio.client import Client
from temporalio.exceptions import WorkflowAlreadyStartedError
from temporalio.worker import Worker

from src.siteline.core.config import get_settings
from src.siteline.core.db import dispose_engine
from src.siteline.core.logging import get_logger, setup_logging
from src.siteline.temporal.activities import send_deadline_reminders
from src.siteline.temporal.workflows import (
    DEADLINE_REMINDER_WORKFLOW_ID,
    DeadlineReminderWorkflow,
)

logger = get_logger(__name__)

WORKER_HEALTH_PORT = 8001


def create_worker(client: Client, task_queue: str) -> Worker:
    return Worker(
        client,
        task_queue=task_queue,
        workflows=[DeadlineReminderWorkflow],
        activities=[send_deadline_reminders],
        max_concurrent_activities=10,
        max_concurrent_workflow_tasks=10,
    )


async def ensure_reminder_schedule(client: Client) -> bool:
    """Start the cron reminder workflow unless it is already running.

    Returns True if a new workflow was started.
    """
    settings = get_settings()
    if not settings.deadline_reminder_schedule:
        logger.info("Deadline reminders not scheduled (DEADLINE_REMINDER_SCHEDULE unset)")
        return False
    try:
        await client.start_workflow(
            DeadlineReminderWorkflow.run,
            settings.deadline_reminder_days,
            id=DEADLINE_REMINDER_WORKFLOW_ID,
            task_queue=settings.temporal_task_queue,
            cron_schedule=settings.deadline_reminder_schedule,
        )
    except WorkflowAlreadyStartedError:
        logger.info("Deadline reminder schedule already running")
        return False
    logger.info("Deadline reminder schedule started", cron=settings.deadline_reminder_schedule)
    return True


async def run_health_server(task_queue: str, port: int = WORKER_HEALTH_PORT) -> None:
    """Lightweight health server for container probes."""
    health_app = FastAPI(title="Siteline Worker Health")

    @health_app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "temporal-worker", "task_queue": task_queue}

    @health_app.get("/ready")
    async def ready() -> dict[str, str]:
        return {"status": "ready"}

    config = uvicorn.Config(health_app, host="0.0.0.0", port=port, log_level="warning")
    server = uvicorn.Server(config)
    logger.info(f"Starting health server on port {port}")
    await server.serve()


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.debug)

    client = await Client.connect(settings.temporal_host, namespace=settings.temporal_namespace)
    worker = create_worker(client, settings.temporal_task_queue)
    logger.info(f"Polling task queue: {settings.temporal_task_queue}")

    try:
        await ensure_reminder_schedule(client)
        await asyncio.gather(worker.run(), run_health_server(settings.temporal_task_queue))
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())

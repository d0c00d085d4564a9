"""
Deadline Reminder Workflow.

Notifies assignees of tasks that are due soon. Meant to run on a cron
schedule (DEADLINE_REMINDER_SCHEDULE). Reminders are at-most-once: the
activity is never retried, so a failed run sends nothing rather than
sending twice.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.siteline.temporal.activities import send_deadline_reminders

WORKFLOW_ID = "deadline-reminders"


@workflow.defn
class DeadlineReminderWorkflow:
    @workflow.run
    async def run(self, days_ahead: int = 2) -> dict[str, int]:
        workflow.logger.info(f"Starting deadline reminders (days ahead: {days_ahead})")

        result = await workflow.execute_activity(
            send_deadline_reminders,
            days_ahead,
            start_to_close_timeout=timedelta(minutes=10),
            retry_policy=RetryPolicy(maximum_attempts=1),
        )

        workflow.logger.info(
            f"Deadline reminders complete: {result['notified']} of {result['tasks']} tasks"
        )
        return result

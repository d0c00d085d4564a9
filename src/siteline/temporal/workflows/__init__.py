"""Temporal Workflows - deterministic orchestration, no I/O."""

from src.siteline.temporal.workflows.deadline_reminder import (
    WORKFLOW_ID as DEADLINE_REMINDER_WORKFLOW_ID,
)
from src.siteline.temporal.workflows.deadline_reminder import DeadlineReminderWorkflow

__all__ = ["DEADLINE_REMINDER_WORKFLOW_ID", "DeadlineReminderWorkflow"]

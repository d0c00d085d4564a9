"""
Temporal Activities.

Side effects (database reads, notification delivery) live here, never in
workflows.
"""

from src.siteline.temporal.activities.reminders import send_deadline_reminders

__all__ = ["send_deadline_reminders"]

"""
Notification data classes module.

Contains the progress notification handed to background jobs.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from epidown.core.utils.timezone_utils import format_datetime_iso, get_utc_now


class ProgressStatus(Enum):
    """Progress notification status."""
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    FAILED = 'failed'


@dataclass
class ProgressNotification:
    """
    Progress notification for a running job.

    Jobs only write to it: every assignment to ``current_message`` is kept
    in ``messages`` so the run can be audited afterwards.

    Attributes:
        title: Title of the job run (e.g., 'Episode Search').
        status: Current status.
        messages: Every message reported so far, oldest first.
        id: Unique identifier of the notification.
        created_at: UTC timestamp when the notification was created.
        completed_at: UTC timestamp when the status left IN_PROGRESS.
    """
    title: str
    status: ProgressStatus = ProgressStatus.IN_PROGRESS
    messages: list[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    created_at: datetime = field(default_factory=get_utc_now)
    completed_at: datetime | None = None

    @property
    def current_message(self) -> str:
        """Return the latest reported message."""
        return self.messages[-1] if self.messages else ''

    @current_message.setter
    def current_message(self, message: str) -> None:
        self.messages.append(message)

    def complete(self, message: str | None = None) -> None:
        """Mark the notification completed."""
        if message:
            self.current_message = message
        self.status = ProgressStatus.COMPLETED
        self.completed_at = get_utc_now()

    def fail(self, message: str | None = None) -> None:
        """Mark the notification failed."""
        if message:
            self.current_message = message
        self.status = ProgressStatus.FAILED
        self.completed_at = get_utc_now()

    def to_dict(self) -> dict[str, Any]:
        """Convert notification to dictionary representation."""
        return {
            'id': self.id,
            'title': self.title,
            'status': self.status.value,
            'current_message': self.current_message,
            'messages': list(self.messages),
            'created_at_utc': format_datetime_iso(self.created_at),
            'completed_at_utc': format_datetime_iso(self.completed_at),
        }

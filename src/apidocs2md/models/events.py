"""Event types for the conversion session API."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ConversionStatus(str, Enum):
    """Lifecycle states of a conversion session."""

    IDLE = "idle"
    FETCHING = "fetching"
    CONVERTING = "converting"
    COMPLETED = "completed"
    ERROR = "error"


# Progress percentage reported on entering each state
STATUS_PROGRESS = {
    ConversionStatus.IDLE: 0,
    ConversionStatus.FETCHING: 20,
    ConversionStatus.CONVERTING: 60,
    ConversionStatus.COMPLETED: 100,
    ConversionStatus.ERROR: 0,
}


@dataclass
class ConversionEvent:
    """
    Event emitted while a page is fetched and converted.

    Example:
        async for event in session.run("https://docs.example.com/api"):
            if event.status == ConversionStatus.ERROR:
                print(f"Error: {event.error}")
            else:
                print(f"{event.progress}% {event.message}")
    """

    status: ConversionStatus
    message: str = ""
    progress: int = 0

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    url: Optional[str] = None
    error: Optional[str] = None
    markdown: Optional[str] = None

    @classmethod
    def for_status(cls, status: ConversionStatus, message: str = "", **kwargs: object) -> "ConversionEvent":
        """Build an event with the standard progress value for ``status``."""
        return cls(status=status, message=message, progress=STATUS_PROGRESS[status], **kwargs)  # type: ignore[arg-type]

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.status == ConversionStatus.ERROR

    @property
    def is_busy(self) -> bool:
        """Check if the session is still fetching or converting."""
        return self.status in (ConversionStatus.FETCHING, ConversionStatus.CONVERTING)

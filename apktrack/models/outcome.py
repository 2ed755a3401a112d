"""
Fetch and check outcome models.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class FetchStatus(Enum):
    """Result of a single page request."""
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    NETWORK_ERROR = "network_error"
    OTHER_ERROR = "other_error"


class CheckStatus(Enum):
    """Result of an update check, as reported to the caller."""
    SUCCESS = "success"
    UPDATED = "updated"
    ERROR = "error"
    NETWORK_ERROR = "network_error"


class ErrorKind(Enum):
    """Why a check did not produce a version."""
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    MALFORMED_PAGE = "malformed_page"
    NON_VERSION_TEXT = "non_version_text"
    NETWORK = "network"
    TRANSPORT = "transport"

    @property
    def is_fatal(self) -> bool:
        """Fatal errors stop automatic checks for the application."""
        return self not in (ErrorKind.NETWORK, ErrorKind.TRANSPORT)


@dataclass
class FetchResult:
    """Outcome of fetching one source page."""

    status: FetchStatus
    body: Optional[str] = None
    message: Optional[str] = None

    @property
    def fatal(self) -> bool:
        return self.status == FetchStatus.NOT_FOUND

    @property
    def is_success(self) -> bool:
        return self.status == FetchStatus.SUCCESS

    @classmethod
    def success(cls, body: str) -> 'FetchResult':
        return cls(FetchStatus.SUCCESS, body=body)

    @classmethod
    def not_found(cls, message: str) -> 'FetchResult':
        return cls(FetchStatus.NOT_FOUND, message=message)

    @classmethod
    def network_error(cls, message: str) -> 'FetchResult':
        return cls(FetchStatus.NETWORK_ERROR, message=message)

    @classmethod
    def other_error(cls, message: str) -> 'FetchResult':
        return cls(FetchStatus.OTHER_ERROR, message=message)


@dataclass
class CheckOutcome:
    """Represents the terminal result of checking one application."""

    package_name: str
    status: CheckStatus
    message: Optional[str] = None
    error: Optional[ErrorKind] = None
    source: Optional[str] = None
    check_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        labels = {
            CheckStatus.SUCCESS: "UP TO DATE",
            CheckStatus.UPDATED: "UPDATED",
            CheckStatus.ERROR: "ERROR",
            CheckStatus.NETWORK_ERROR: "NETWORK ERROR",
        }
        status = labels[self.status]
        if self.error:
            status = f"{status}: {self.error.value}"

        return (
            f"[{status}] {self.package_name}\n"
            f"  Source:  {self.source or '-'}\n"
            f"  Message: {self.message or ''}"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'package_name': self.package_name,
            'status': self.status.value,
            'message': self.message,
            'error': self.error.value if self.error else None,
            'source': self.source,
            'check_time': self.check_time.isoformat() if self.check_time else None,
        }

    @property
    def is_success(self) -> bool:
        """Check if a version was obtained."""
        return self.status in (CheckStatus.SUCCESS, CheckStatus.UPDATED)

    @property
    def is_fatal(self) -> bool:
        return self.error is not None and self.error.is_fatal

"""
Application Record model.
"""

from dataclasses import dataclass
from datetime import datetime
from functools import cmp_to_key
from typing import Optional, List, Iterable, Callable


@dataclass(eq=False)
class ApplicationRecord:
    """Tracked check state of one installed application."""

    package_name: str
    display_name: str
    version: Optional[str]
    latest_version: Optional[str] = None
    last_check_fatal_error: bool = False
    last_check_date: Optional[datetime] = None
    system_app: bool = False

    # Volatile, never persisted
    currently_checking: bool = False

    @property
    def is_update_available(self) -> bool:
        """Check if a newer version than the installed one was found."""
        if self.version is None or self.latest_version is None:
            return False
        if self.last_check_fatal_error:
            return False
        return self.version != self.latest_version

    @property
    def was_checked(self) -> bool:
        return self.latest_version is not None

    def __eq__(self, other) -> bool:
        # Two records with the same package name are the same application.
        if isinstance(other, ApplicationRecord):
            return self.package_name == other.package_name
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.package_name)

    def __str__(self) -> str:
        latest = self.latest_version or 'never checked'
        flag = " [FATAL]" if self.last_check_fatal_error else ""
        return f"{self.display_name} ({self.package_name}) {self.version} -> {latest}{flag}"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'package_name': self.package_name,
            'display_name': self.display_name,
            'version': self.version,
            'latest_version': self.latest_version,
            'last_check_fatal_error': self.last_check_fatal_error,
            'last_check_date': self.last_check_date.isoformat() if self.last_check_date else None,
            'system_app': self.system_app,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ApplicationRecord':
        """Restore a record from its dictionary form."""
        last_check = data.get('last_check_date')
        return cls(
            package_name=data['package_name'],
            display_name=data.get('display_name', data['package_name']),
            version=data.get('version'),
            latest_version=data.get('latest_version'),
            last_check_fatal_error=bool(data.get('last_check_fatal_error', False)),
            last_check_date=datetime.fromisoformat(last_check) if last_check else None,
            system_app=bool(data.get('system_app', False)),
        )


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_alphabetical(a1: ApplicationRecord, a2: ApplicationRecord) -> int:
    """Sort by display name; package name breaks ties between homonyms."""
    return _cmp(
        (a1.display_name, a1.package_name),
        (a2.display_name, a2.package_name)
    )


def compare_system(a1: ApplicationRecord, a2: ApplicationRecord) -> int:
    """User applications first, system applications last, alphabetical within."""
    if a1.system_app != a2.system_app:
        return 1 if a1.system_app else -1
    return compare_alphabetical(a1, a2)


def _update_rank(app: ApplicationRecord) -> int:
    if not app.was_checked or app.last_check_fatal_error:
        return 2
    if app.version != app.latest_version:
        return 0
    return 1


def compare_updated(a1: ApplicationRecord, a2: ApplicationRecord) -> int:
    """
    Sort applications by update state.

    - Checked applications with a newer version come first.
    - Checked, up-to-date applications follow.
    - Never checked applications and fatal errors go to the bottom.
    - Applications in the same group are sorted alphabetically.
    """
    rank = _cmp(_update_rank(a1), _update_rank(a2))
    if rank:
        return rank
    return compare_alphabetical(a1, a2)


def compare_system_updated(a1: ApplicationRecord, a2: ApplicationRecord) -> int:
    """User applications before system ones, then by update state."""
    if a1.system_app != a2.system_app:
        return 1 if a1.system_app else -1
    return compare_updated(a1, a2)


COMPARATORS = {
    'alphabetical': compare_alphabetical,
    'system': compare_system,
    'updated': compare_updated,
    'system_updated': compare_system_updated,
}


def sort_applications(
    apps: Iterable[ApplicationRecord],
    mode: str = 'system_updated'
) -> List[ApplicationRecord]:
    """
    Return the applications sorted with one of the named comparators.

    Args:
        apps: Records to sort
        mode: One of 'alphabetical', 'system', 'updated', 'system_updated'

    Returns:
        New sorted list
    """
    comparator: Optional[Callable] = COMPARATORS.get(mode)
    if comparator is None:
        raise ValueError(f"Unknown sort mode: {mode}")
    return sorted(apps, key=cmp_to_key(comparator))

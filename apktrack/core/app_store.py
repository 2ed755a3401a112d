"""
Application Store - JSON persistence of tracked applications.
"""

import os
import json
import logging
from typing import Dict, Any, List, Optional
from threading import Lock

from apktrack.models.application import ApplicationRecord

logger = logging.getLogger('ApplicationStore')


class ApplicationStore:
    """Keeps application records in a JSON file keyed by package name."""

    def __init__(self, state_file: str = None):
        """
        Initialize the store.

        Args:
            state_file: Path to state JSON file
        """
        if state_file is None:
            state_file = os.path.join(os.path.expanduser('~'), '.apktrack', 'apps.json')

        self.state_file = state_file
        self._lock = Lock()
        self._state = self._load_state()

    def _load_state(self) -> Dict[str, Any]:
        """Load state from file."""
        try:
            if os.path.exists(self.state_file):
                with open(self.state_file, 'r', encoding='utf-8') as f:
                    return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Could not load state file: {e}")
        return {}

    def _save_state(self) -> None:
        """Save state to file."""
        try:
            directory = os.path.dirname(self.state_file)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(self.state_file, 'w', encoding='utf-8') as f:
                json.dump(self._state, f, indent=2)
        except IOError as e:
            logger.error(f"Error saving state file: {e}")

    def get(self, package_name: str) -> Optional[ApplicationRecord]:
        """
        Get the record of an application.

        Args:
            package_name: Package identifier

        Returns:
            ApplicationRecord or None if the application is not tracked
        """
        with self._lock:
            data = self._state.get(package_name)
            if not data:
                return None
            return ApplicationRecord.from_dict(data)

    def update_app(self, record: ApplicationRecord) -> None:
        """
        Persist the check state of an application.

        Args:
            record: Record to store; replaces any previous entry
        """
        with self._lock:
            self._state[record.package_name] = record.to_dict()
            self._save_state()

    def add_app(self, record: ApplicationRecord) -> bool:
        """
        Start tracking an application.

        Returns:
            False if the package was already tracked
        """
        with self._lock:
            if record.package_name in self._state:
                return False
            self._state[record.package_name] = record.to_dict()
            self._save_state()
            return True

    def remove_app(self, package_name: str) -> None:
        """Stop tracking an application."""
        with self._lock:
            if package_name in self._state:
                del self._state[package_name]
                self._save_state()

    def all_apps(self) -> List[ApplicationRecord]:
        """Get all tracked applications."""
        with self._lock:
            return [ApplicationRecord.from_dict(data) for data in self._state.values()]

"""
Update Service - Worker that checks tracked applications one at a time.
"""

import csv
import os
import logging
from typing import Callable, List, Optional

from apktrack.core.app_store import ApplicationStore
from apktrack.core.rate_limiter import RateLimiter, DEFAULT_REQUEST_DELAY
from apktrack.core.registry import SourceRegistry
from apktrack.core.resolver import UpdateResolver
from apktrack.handlers.base_handler import BaseHandler
from apktrack.handlers.http_handler import HTTPHandler
from apktrack.models.application import ApplicationRecord
from apktrack.models.outcome import CheckOutcome, CheckStatus

Listener = Callable[[ApplicationRecord, CheckOutcome], None]

APP_NOT_TRACKED_MESSAGE = "Application is not tracked"


class UpdateService:
    """
    Checks applications sequentially and notifies listeners of each result.

    One service is one worker: it never runs two checks at once and waits
    the configured delay between checks so the sources are not flooded.
    """

    def __init__(
        self,
        config_path: str = None,
        settings_path: str = None,
        state_file: str = None,
        fetcher: BaseHandler = None,
        store: ApplicationStore = None,
        rate_limiter: RateLimiter = None
    ):
        """
        Initialize the update service.

        Args:
            config_path: Path to sources.yaml
            settings_path: Path to settings.yaml
            state_file: Path to the application state JSON file
            fetcher: Page fetcher (default HTTPHandler built from settings)
            store: Application store (default JSON store on state_file)
            rate_limiter: Delay between checks (default from settings)
        """
        self.registry = SourceRegistry(config_path, settings_path)
        settings = self.registry.get_settings()
        self.logger = logging.getLogger('UpdateService')
        self._setup_logging()

        self.store = store or ApplicationStore(state_file)
        self.fetcher = fetcher or HTTPHandler(settings)

        if rate_limiter is None:
            delay = settings.get('scheduler', {}).get('request_delay', DEFAULT_REQUEST_DELAY)
            rate_limiter = RateLimiter(delay)
        self.rate_limiter = rate_limiter

        self.resolver = UpdateResolver(
            self.registry.get_cascade(),
            self.fetcher,
            self.store
        )
        self._listeners: List[Listener] = []

    def _setup_logging(self) -> None:
        """Configure logging based on settings."""
        log_settings = self.registry.get_settings().get('logging', {})
        level = getattr(logging, str(log_settings.get('level', 'INFO')).upper(), logging.INFO)
        format_str = log_settings.get(
            'format',
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        logging.basicConfig(level=level, format=format_str)

    def add_listener(self, listener: Listener) -> None:
        """Register a callback receiving (record, outcome) after each check."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, record: ApplicationRecord, outcome: CheckOutcome) -> None:
        for listener in list(self._listeners):
            try:
                listener(record, outcome)
            except Exception:
                self.logger.exception(f"Listener failed for {record.package_name}")

    def check_app(self, package_name: str) -> CheckOutcome:
        """
        Check one tracked application for updates.

        Args:
            package_name: Package identifier

        Returns:
            CheckOutcome of the cascade
        """
        record = self.store.get(package_name)
        if record is None:
            self.logger.warning(f"{APP_NOT_TRACKED_MESSAGE}: {package_name}")
            return CheckOutcome(
                package_name=package_name,
                status=CheckStatus.ERROR,
                message=APP_NOT_TRACKED_MESSAGE
            )
        return self.check_record(record)

    def check_record(self, record: ApplicationRecord) -> CheckOutcome:
        """
        Run the cascade for a record, notify listeners, then hold the delay.
        """
        self.rate_limiter.wait()
        self.logger.info(f"Checking for updates: {record.package_name}")
        try:
            outcome = self.resolver.resolve(record)
            self.logger.info(
                f"Result for {record.package_name}: {outcome.status.value}"
                f" ({outcome.message})"
            )
            self._notify(record, outcome)
            return outcome
        finally:
            self.rate_limiter.mark()

    def check_all(
        self,
        include_system: bool = False,
        skip_fatal: bool = True
    ) -> List[CheckOutcome]:
        """
        Check every tracked application.

        Args:
            include_system: Also check system applications
            skip_fatal: Skip applications whose last check was a fatal error

        Returns:
            List of CheckOutcome objects
        """
        apps = self.store.all_apps()
        targets = [
            app for app in apps
            if (include_system or not app.system_app)
            and not (skip_fatal and app.last_check_fatal_error)
        ]

        self.logger.info(f"Checking {len(targets)} of {len(apps)} applications...")

        return [self.check_record(app) for app in targets]

    def export_to_csv(
        self,
        outcomes: List[CheckOutcome],
        output_path: Optional[str] = None
    ) -> str:
        """
        Export outcomes to CSV file.

        Args:
            outcomes: List of CheckOutcome objects
            output_path: Output CSV file path

        Returns:
            Path to the created CSV file
        """
        if output_path is None:
            output_path = os.path.join(os.getcwd(), 'output.csv')

        os.makedirs(os.path.dirname(output_path) if os.path.dirname(output_path) else '.', exist_ok=True)

        fieldnames = ['package_name', 'status', 'message', 'error', 'source', 'check_time']

        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()

            for outcome in outcomes:
                row = outcome.to_dict()
                writer.writerow({key: row[key] if row[key] is not None else '' for key in fieldnames})

        self.logger.info(f"Results exported to: {output_path}")
        return output_path


def check_for_updates(package_name: str, state_file: str = None) -> CheckOutcome:
    """
    Convenience function to check a single application for updates.

    Args:
        package_name: Package identifier
        state_file: Path to the application state JSON file

    Returns:
        CheckOutcome object
    """
    service = UpdateService(state_file=state_file)
    return service.check_app(package_name)

"""
Update Resolver - Runs the source cascade for one application.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, List, Sequence

from apktrack.core.classifier import VersionClassifier
from apktrack.core.extractor import SourceExtractor
from apktrack.handlers.base_handler import BaseHandler
from apktrack.models.application import ApplicationRecord
from apktrack.models.outcome import (
    CheckOutcome,
    CheckStatus,
    ErrorKind,
    FetchResult,
    FetchStatus,
)
from apktrack.models.source import SourceSpec

MALFORMED_PAGE_MESSAGE = "No version could be found on the page"
UNAVAILABLE_MESSAGE = "Application is no longer available"
NO_SOURCES_MESSAGE = "No update sources configured"
CHECK_FAILED_MESSAGE = "Update check failed"


@dataclass
class _Attempt:
    """What one source said about the application, before it is committed."""

    status: CheckStatus
    message: Optional[str]
    error: Optional[ErrorKind]
    source: str
    latest_version: Optional[str]
    fatal: bool


class UpdateResolver:
    """
    Determines whether a newer version of an application exists.

    Sources are tried in order. A fatal error moves on to the next source,
    a version stops the cascade, and a network error aborts it without
    touching the record so the next scheduled check starts over.
    """

    def __init__(
        self,
        sources: Sequence[SourceSpec],
        fetcher: BaseHandler,
        store,
        extractor: SourceExtractor = None,
        classifier: VersionClassifier = None
    ):
        """
        Initialize the resolver.

        Args:
            sources: Cascade, primary source first
            fetcher: Page fetcher
            store: Application store; its update_app() receives committed records
            extractor: Version extractor (default SourceExtractor)
            classifier: Version classifier (default VersionClassifier)
        """
        self.sources: List[SourceSpec] = list(sources)
        self.fetcher = fetcher
        self.store = store
        self.extractor = extractor or SourceExtractor()
        self.classifier = classifier or VersionClassifier()
        self.logger = logging.getLogger('UpdateResolver')

    def resolve(self, record: ApplicationRecord) -> CheckOutcome:
        """
        Check one application against the cascade and commit the outcome.

        Args:
            record: Application to check; mutated in place on commit

        Returns:
            CheckOutcome of the terminal attempt
        """
        if not self.sources:
            self.logger.error(NO_SOURCES_MESSAGE)
            return CheckOutcome(
                package_name=record.package_name,
                status=CheckStatus.ERROR,
                message=NO_SOURCES_MESSAGE
            )

        record.currently_checking = True
        try:
            attempt = None
            for source in self.sources:
                record.currently_checking = True
                attempt = self._attempt(source, record)
                self.logger.info(
                    f"{source.name} check for {record.package_name} returned: "
                    f"{attempt.status.value}"
                )
                if attempt.status == CheckStatus.NETWORK_ERROR:
                    # Transient: leave the record alone and retry later.
                    return self._to_outcome(record, attempt)
                if attempt.status != CheckStatus.ERROR:
                    break

            self._commit(record, attempt)
            return self._to_outcome(record, attempt)
        except Exception as e:
            self.logger.exception(f"Update check failed for {record.package_name}")
            return CheckOutcome(
                package_name=record.package_name,
                status=CheckStatus.ERROR,
                message=f"{CHECK_FAILED_MESSAGE}: {e}"
            )
        finally:
            record.currently_checking = False

    def _attempt(self, source: SourceSpec, record: ApplicationRecord) -> _Attempt:
        """Fetch, extract and classify against a single source."""
        fetched = self.fetcher.fetch(
            source.url_template,
            record.package_name,
            headers=source.headers
        )
        if not fetched.is_success:
            return self._fetch_failure(source, record, fetched)

        extraction = self.extractor.extract(source, fetched.body)
        if not extraction.found:
            if extraction.unavailable:
                return _Attempt(
                    status=CheckStatus.ERROR,
                    message=UNAVAILABLE_MESSAGE,
                    error=ErrorKind.UNAVAILABLE,
                    source=source.id,
                    latest_version=record.latest_version,
                    fatal=True
                )
            return _Attempt(
                status=CheckStatus.ERROR,
                message=MALFORMED_PAGE_MESSAGE,
                error=ErrorKind.MALFORMED_PAGE,
                source=source.id,
                latest_version=record.latest_version,
                fatal=True
            )

        verdict = self.classifier.classify(extraction.candidate, record.version)
        if not verdict.is_valid:
            self.logger.info(f"'{verdict.version}' is not recognized as a version number")
            return _Attempt(
                status=CheckStatus.ERROR,
                message=verdict.version,
                error=ErrorKind.NON_VERSION_TEXT,
                source=source.id,
                latest_version=verdict.version,
                fatal=True
            )

        return _Attempt(
            status=CheckStatus.UPDATED if verdict.is_update else CheckStatus.SUCCESS,
            message=verdict.version,
            error=None,
            source=source.id,
            latest_version=verdict.version,
            fatal=False
        )

    def _fetch_failure(
        self,
        source: SourceSpec,
        record: ApplicationRecord,
        fetched: FetchResult
    ) -> _Attempt:
        if fetched.status == FetchStatus.NOT_FOUND:
            return _Attempt(
                status=CheckStatus.ERROR,
                message=fetched.message,
                error=ErrorKind.NOT_FOUND,
                source=source.id,
                latest_version=fetched.message,
                fatal=True
            )

        kind = ErrorKind.NETWORK if fetched.status == FetchStatus.NETWORK_ERROR else ErrorKind.TRANSPORT
        return _Attempt(
            status=CheckStatus.NETWORK_ERROR,
            message=fetched.message,
            error=kind,
            source=source.id,
            latest_version=record.latest_version,
            fatal=record.last_check_fatal_error
        )

    def _commit(self, record: ApplicationRecord, attempt: _Attempt) -> None:
        """Apply the terminal attempt to the record and persist it."""
        previous = (record.latest_version, record.last_check_fatal_error, record.last_check_date)
        record.latest_version = attempt.latest_version
        record.last_check_fatal_error = attempt.fatal
        record.last_check_date = datetime.now(timezone.utc)
        try:
            self.store.update_app(record)
        except Exception:
            # The record must keep matching what is persisted.
            record.latest_version, record.last_check_fatal_error, record.last_check_date = previous
            raise

    @staticmethod
    def _to_outcome(record: ApplicationRecord, attempt: _Attempt) -> CheckOutcome:
        return CheckOutcome(
            package_name=record.package_name,
            status=attempt.status,
            message=attempt.message,
            error=attempt.error,
            source=attempt.source
        )

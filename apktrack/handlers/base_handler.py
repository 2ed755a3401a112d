"""
Abstract base handler for page retrieval.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
import logging

from apktrack.models.outcome import FetchResult


class BaseHandler(ABC):
    """Abstract base class for page fetchers used by the update cascade."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        """
        Initialize handler with application settings.

        Args:
            settings: Settings dictionary (the 'http' block is read)
        """
        self.settings = settings or {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def fetch(
        self,
        url_template: str,
        package_name: str,
        headers: Optional[Dict[str, str]] = None
    ) -> FetchResult:
        """
        Fetch the page for a package.

        Implementations never raise: every failure is returned as a
        FetchResult.

        Args:
            url_template: URL with one %s slot for the package name
            package_name: Package identifier to substitute
            headers: Extra request headers for this source

        Returns:
            FetchResult with the page body or a classified failure
        """
        pass

    @abstractmethod
    def get_method_name(self) -> str:
        """
        Get the name of the retrieval method.

        Returns:
            String identifier for this method
        """
        pass

    def handle_error(self, url: str, exception: Exception) -> None:
        """
        Log an error raised while retrieving a page.

        Args:
            url: The requested URL
            exception: The exception that occurred
        """
        self.logger.error(
            f"{url} could not be retrieved: "
            f"{type(exception).__name__}: {str(exception)}"
        )

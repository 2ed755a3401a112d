"""
HTTP GET page fetcher.
Downloads a store page for a package and classifies transport failures.
"""

import socket
from typing import Optional, Dict, Any

import requests
from urllib3.exceptions import NameResolutionError

from .base_handler import BaseHandler
from apktrack.models.outcome import FetchResult

DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)
DEFAULT_TIMEOUT = 15
DEFAULT_CHUNK_SIZE = 2048

NOT_FOUND_MESSAGE = "No data found for this package"
NETWORK_ERROR_MESSAGE = "Network error: the update source could not be reached"
NOT_FOUND_CODES = (404, 410)


def _is_name_resolution_error(exception: BaseException) -> bool:
    """Walk the exception chain looking for a DNS lookup failure."""
    seen = set()
    pending = [exception]
    while pending:
        exc = pending.pop()
        if exc is None or id(exc) in seen:
            continue
        seen.add(id(exc))

        if isinstance(exc, (socket.gaierror, NameResolutionError)):
            return True

        pending.append(exc.__cause__)
        pending.append(exc.__context__)
        pending.append(getattr(exc, 'reason', None))
        pending.extend(arg for arg in exc.args if isinstance(arg, BaseException))
    return False


class HTTPHandler(BaseHandler):
    """Fetches source pages with a plain GET request."""

    def __init__(
        self,
        settings: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None
    ):
        super().__init__(settings)
        http_settings = self.settings.get('http', {})
        self.timeout = http_settings.get('timeout', DEFAULT_TIMEOUT)
        self.user_agent = http_settings.get('user_agent', DEFAULT_USER_AGENT)
        self.chunk_size = http_settings.get('chunk_size', DEFAULT_CHUNK_SIZE)
        self.session = session

    def get_method_name(self) -> str:
        return "http_get"

    def fetch(
        self,
        url_template: str,
        package_name: str,
        headers: Optional[Dict[str, str]] = None
    ) -> FetchResult:
        """
        Fetch a source page for a package.

        Returns:
            FetchResult; NOT_FOUND for 404/410, NETWORK_ERROR when the host
            cannot be resolved, OTHER_ERROR for every other failure
        """
        url = url_template % package_name
        request_headers = {'User-Agent': self.user_agent}
        request_headers.update(headers or {})

        self.logger.info(f"Requesting {url}")
        get = self.session.get if self.session is not None else requests.get
        response = None
        try:
            response = get(
                url,
                headers=request_headers,
                timeout=self.timeout,
                stream=True
            )

            if response.status_code in NOT_FOUND_CODES:
                self.logger.info(f"{url} returned {response.status_code}")
                return FetchResult.not_found(NOT_FOUND_MESSAGE)

            response.raise_for_status()
            return FetchResult.success(self._read_body(response))

        except requests.exceptions.RequestException as e:
            if _is_name_resolution_error(e):
                self.logger.warning(f"Could not resolve host for {url}: {e}")
                return FetchResult.network_error(NETWORK_ERROR_MESSAGE)
            self.handle_error(url, e)
            return FetchResult.other_error(f"An error occurred: {e}")

        except (OSError, UnicodeError) as e:
            self.handle_error(url, e)
            return FetchResult.other_error(f"An error occurred: {e}")

        finally:
            if response is not None:
                response.close()

    def _read_body(self, response: requests.Response) -> str:
        """Read the whole body in bounded chunks and decode it."""
        chunks = []
        for chunk in response.iter_content(chunk_size=self.chunk_size):
            if chunk:
                chunks.append(chunk)
        # requests falls back to ISO-8859-1 for text/* without a charset.
        content_type = response.headers.get('Content-Type', '')
        if 'charset' in content_type.lower():
            encoding = response.encoding or 'utf-8'
        else:
            encoding = 'utf-8'
        try:
            return b''.join(chunks).decode(encoding, errors='replace')
        except LookupError:
            return b''.join(chunks).decode('utf-8', errors='replace')

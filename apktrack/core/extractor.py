"""
Source Extractor - Pulls a candidate version out of a fetched page.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from apktrack.models.source import SourceSpec


@dataclass(frozen=True)
class Extraction:
    """Candidate version found on a page, or the reason there is none."""

    candidate: Optional[str] = None
    unavailable: bool = False

    @property
    def found(self) -> bool:
        return self.candidate is not None


class SourceExtractor:
    """Applies a source's version pattern to raw page text."""

    def __init__(self):
        self.logger = logging.getLogger('SourceExtractor')

    def extract(self, source: SourceSpec, page_text: str) -> Extraction:
        """
        Extract the advertised version from a page.

        The first match of the source pattern wins; there is no fallback
        pattern. When nothing matches, the source's unavailable pattern (if
        any) tells a delisted package apart from a page layout change.

        Args:
            source: Source the page was fetched from
            page_text: Raw page body

        Returns:
            Extraction with the stripped candidate, or the unavailable flag
        """
        match = source.version_pattern.search(page_text or '')
        if match:
            candidate = match.group(1).strip()
            if candidate:
                self.logger.info(f"Version obtained from {source.id}: {candidate}")
                return Extraction(candidate=candidate)

        if source.unavailable_pattern is not None and page_text:
            if source.unavailable_pattern.search(page_text):
                self.logger.info(f"Application no longer available on {source.id}")
                return Extraction(unavailable=True)

        self.logger.info(f"Nothing matched by the version pattern of {source.id}")
        self.logger.debug(page_text)
        return Extraction()

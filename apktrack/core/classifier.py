"""
Version Classifier - Tells version numbers apart from store phrases.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


# Stores answer things like "Varies with device" instead of a version.
# Whitespace is only tolerated right before "(", as in "1.2 (beta)".
VERSION_SHAPE = re.compile(r'^(?:\S|\s\()*$')


class VersionKind(Enum):
    VALID = "valid"
    NOT_A_VERSION = "not_a_version"


@dataclass(frozen=True)
class Classification:
    """Verdict on a candidate version string."""

    kind: VersionKind
    version: str
    is_update: bool = False

    @property
    def is_valid(self) -> bool:
        return self.kind == VersionKind.VALID


def is_version(candidate: Optional[str]) -> bool:
    """Check whether a candidate looks like a version number."""
    if not candidate:
        return False
    return VERSION_SHAPE.match(candidate) is not None


class VersionClassifier:
    """Classifies extracted candidates against the installed version."""

    def classify(self, candidate: str, installed_version: Optional[str]) -> Classification:
        """
        Classify a candidate version.

        Args:
            candidate: String extracted from a source page
            installed_version: Version currently installed on the device

        Returns:
            Classification; is_update is set for valid versions that differ
            from the installed one
        """
        if not is_version(candidate):
            return Classification(VersionKind.NOT_A_VERSION, candidate)

        return Classification(
            VersionKind.VALID,
            candidate,
            is_update=candidate != installed_version
        )

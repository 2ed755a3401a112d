"""
Models package - Data classes for the application.
"""

from apktrack.models.application import ApplicationRecord, sort_applications
from apktrack.models.outcome import (
    CheckOutcome,
    CheckStatus,
    ErrorKind,
    FetchResult,
    FetchStatus,
)
from apktrack.models.source import SourceSpec

__all__ = [
    'ApplicationRecord',
    'sort_applications',
    'CheckOutcome',
    'CheckStatus',
    'ErrorKind',
    'FetchResult',
    'FetchStatus',
    'SourceSpec',
]

"""
APKTrack - Application update discovery

Finds out whether a newer version of an installed application exists by
scraping its store page, falling back to mirror sources when the primary
page has nothing usable.
"""

from .core.service import UpdateService, check_for_updates
from .core.resolver import UpdateResolver
from .core.registry import SourceRegistry
from .core.app_store import ApplicationStore
from .models.application import ApplicationRecord, sort_applications
from .models.outcome import CheckOutcome, CheckStatus
from .models.source import SourceSpec

__version__ = "1.0.0"
__all__ = [
    'UpdateService',
    'check_for_updates',
    'UpdateResolver',
    'SourceRegistry',
    'ApplicationStore',
    'ApplicationRecord',
    'sort_applications',
    'CheckOutcome',
    'CheckStatus',
    'SourceSpec',
]

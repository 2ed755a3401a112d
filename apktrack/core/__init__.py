"""
Core package - Contains main business logic.
"""

from apktrack.core.app_store import ApplicationStore
from apktrack.core.classifier import VersionClassifier
from apktrack.core.extractor import SourceExtractor
from apktrack.core.rate_limiter import RateLimiter
from apktrack.core.registry import SourceRegistry
from apktrack.core.resolver import UpdateResolver
from apktrack.core.service import UpdateService, check_for_updates

__all__ = [
    'ApplicationStore',
    'VersionClassifier',
    'SourceExtractor',
    'RateLimiter',
    'SourceRegistry',
    'UpdateResolver',
    'UpdateService',
    'check_for_updates',
]

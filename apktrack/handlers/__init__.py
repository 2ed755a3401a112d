"""
Handlers package - Page retrieval implementations.
"""

from apktrack.handlers.base_handler import BaseHandler
from apktrack.handlers.http_handler import HTTPHandler

__all__ = [
    'BaseHandler',
    'HTTPHandler',
]

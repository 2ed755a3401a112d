"""
Pytest configuration and fixtures.
"""

import pytest
import os
import sys
import tempfile
import json

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from apktrack.core.registry import SourceRegistry
from apktrack.handlers.base_handler import BaseHandler
from apktrack.models.application import ApplicationRecord


PLAY_URL = 'https://play.google.com/store/apps/details?id=%s'
APPBRAIN_URL = 'https://www.appbrain.com/app/google/%s'
XPOSED_URL = 'http://repo.xposed.info/module/%s'

XPOSED_SUFFIX = (
    '</div></div></div><div class="field field-name-field-release-type '
    'field-type-list-text field-label-inline clearfix"><div class="field-label">'
    'Release type:&nbsp;</div><div class="field-items"><div class="field-item even">Stable'
)


def play_page(version):
    return f'<html><div class="content" itemprop="softwareVersion">  {version}  </div></html>'


def appbrain_page(version):
    return f'<html><div class="clDesc">Version {version}</div></html>'


def xposed_page(version):
    return f'<html><div class="field-item even">{version}{XPOSED_SUFFIX}</div></html>'


class StubFetcher(BaseHandler):
    """Returns canned results per URL template and records every call."""

    def __init__(self, results):
        super().__init__()
        self.results = results
        self.calls = []

    def get_method_name(self):
        return "stub"

    def fetch(self, url_template, package_name, headers=None):
        self.calls.append((url_template, package_name, headers))
        return self.results[url_template]


class MemoryStore:
    """In-memory stand-in for the application store."""

    def __init__(self, records=()):
        self.records = {r.package_name: r for r in records}
        self.updates = []

    def get(self, package_name):
        return self.records.get(package_name)

    def update_app(self, record):
        self.updates.append(record.to_dict())
        self.records[record.package_name] = record

    def all_apps(self):
        return list(self.records.values())


@pytest.fixture
def temp_state_file():
    """Create a temporary state file for testing."""
    fd, path = tempfile.mkstemp(suffix='.json')
    os.close(fd)
    with open(path, 'w') as f:
        json.dump({}, f)
    yield path
    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def cascade():
    """The shipped source cascade."""
    return SourceRegistry().get_cascade()


@pytest.fixture
def app():
    return ApplicationRecord(
        package_name='com.example.app',
        display_name='Example',
        version='1.0'
    )

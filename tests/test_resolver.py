"""
Tests for the update cascade.
"""


from apktrack.core.resolver import UpdateResolver, MALFORMED_PAGE_MESSAGE
from apktrack.models.application import ApplicationRecord
from apktrack.models.outcome import CheckStatus, ErrorKind, FetchResult

from conftest import (
    PLAY_URL,
    APPBRAIN_URL,
    XPOSED_URL,
    StubFetcher,
    MemoryStore,
    play_page,
    appbrain_page,
    xposed_page,
)

BROKEN = '<html>nothing here</html>'


def resolve(cascade, app, results):
    fetcher = StubFetcher(results)
    store = MemoryStore([app])
    outcome = UpdateResolver(cascade, fetcher, store).resolve(app)
    return outcome, fetcher, store


class TestCascade:
    """Tests for source ordering and short-circuiting."""

    def test_primary_update_end_to_end(self, cascade, app):
        results = {PLAY_URL: FetchResult.success('<div itemprop="softwareVersion">1.1</div>')}

        outcome, fetcher, store = resolve(cascade, app, results)

        assert outcome.status == CheckStatus.UPDATED
        assert outcome.message == '1.1'
        assert outcome.source == 'play_store'
        assert app.latest_version == '1.1'
        assert app.last_check_fatal_error is False
        assert app.last_check_date is not None
        assert app.is_update_available is True
        assert len(store.updates) == 1

    def test_primary_success_stops_cascade(self, cascade, app):
        results = {PLAY_URL: FetchResult.success(play_page('1.0'))}

        outcome, fetcher, store = resolve(cascade, app, results)

        assert outcome.status == CheckStatus.SUCCESS
        assert len(fetcher.calls) == 1
        assert app.is_update_available is False
        assert len(store.updates) == 1

    def test_primary_network_error_halts_without_commit(self, cascade, app):
        app.latest_version = '0.9'
        results = {PLAY_URL: FetchResult.network_error('offline')}

        outcome, fetcher, store = resolve(cascade, app, results)

        assert outcome.status == CheckStatus.NETWORK_ERROR
        assert outcome.error == ErrorKind.NETWORK
        assert len(fetcher.calls) == 1
        assert store.updates == []
        assert app.latest_version == '0.9'
        assert app.last_check_date is None
        assert app.currently_checking is False

    def test_transport_error_halts_without_commit(self, cascade, app):
        results = {PLAY_URL: FetchResult.other_error('Read timed out')}

        outcome, fetcher, store = resolve(cascade, app, results)

        assert outcome.status == CheckStatus.NETWORK_ERROR
        assert outcome.error == ErrorKind.TRANSPORT
        assert store.updates == []

    def test_not_found_advances_to_mirror(self, cascade, app):
        results = {
            PLAY_URL: FetchResult.not_found('No data found'),
            APPBRAIN_URL: FetchResult.success(appbrain_page('1.2')),
        }

        outcome, fetcher, store = resolve(cascade, app, results)

        assert outcome.status == CheckStatus.UPDATED
        assert outcome.source == 'appbrain'
        assert [call[0] for call in fetcher.calls] == [PLAY_URL, APPBRAIN_URL]
        assert fetcher.calls[1][2] == {'Cookie': 'agentok=1'}
        assert app.latest_version == '1.2'
        assert app.last_check_fatal_error is False
        assert len(store.updates) == 1

    def test_falls_through_to_tertiary(self, cascade, app):
        results = {
            PLAY_URL: FetchResult.not_found('No data found'),
            APPBRAIN_URL: FetchResult.success(
                'This app is unfortunately no longer available on the Android market.'
            ),
            XPOSED_URL: FetchResult.success(xposed_page('1.0')),
        }

        outcome, fetcher, store = resolve(cascade, app, results)

        assert outcome.status == CheckStatus.SUCCESS
        assert outcome.source == 'xposed_stable'
        assert len(fetcher.calls) == 3
        assert app.latest_version == '1.0'
        assert len(store.updates) == 1

    def test_tertiary_failure_is_terminal(self, cascade, app):
        results = {
            PLAY_URL: FetchResult.success(BROKEN),
            APPBRAIN_URL: FetchResult.success(BROKEN),
            XPOSED_URL: FetchResult.not_found('No data found'),
        }

        outcome, fetcher, store = resolve(cascade, app, results)

        assert outcome.status == CheckStatus.ERROR
        assert outcome.error == ErrorKind.NOT_FOUND
        assert app.last_check_fatal_error is True
        assert app.latest_version == 'No data found'
        assert app.is_update_available is False
        assert len(store.updates) == 1

    def test_network_error_on_mirror_discards_primary_error(self, cascade, app):
        results = {
            PLAY_URL: FetchResult.not_found('No data found'),
            APPBRAIN_URL: FetchResult.network_error('offline'),
        }

        outcome, fetcher, store = resolve(cascade, app, results)

        assert outcome.status == CheckStatus.NETWORK_ERROR
        assert len(fetcher.calls) == 2
        assert store.updates == []
        assert app.latest_version is None
        assert app.last_check_fatal_error is False


class TestClassification:
    """Tests for how extracted text is committed."""

    def test_non_version_text_advances_cascade(self, cascade, app):
        phrase = FetchResult.success(play_page('Varies with device'))
        results = {PLAY_URL: phrase, APPBRAIN_URL: FetchResult.success(BROKEN),
                   XPOSED_URL: FetchResult.success(BROKEN)}

        outcome, fetcher, store = resolve(cascade, app, results)

        assert len(fetcher.calls) == 3
        assert outcome.status == CheckStatus.ERROR
        assert outcome.error == ErrorKind.MALFORMED_PAGE
        assert app.last_check_fatal_error is True
        assert len(store.updates) == 1

    def test_non_version_text_on_last_source(self, cascade, app):
        results = {
            PLAY_URL: FetchResult.not_found('No data found'),
            APPBRAIN_URL: FetchResult.not_found('No data found'),
            XPOSED_URL: FetchResult.success(xposed_page('Varies with device')),
        }

        outcome, fetcher, store = resolve(cascade, app, results)

        assert outcome.status == CheckStatus.ERROR
        assert outcome.error == ErrorKind.NON_VERSION_TEXT
        assert outcome.message == 'Varies with device'
        assert app.latest_version == 'Varies with device'
        assert app.last_check_fatal_error is True
        assert app.is_update_available is False

    def test_malformed_page_keeps_previous_version(self, cascade, app):
        app.latest_version = '0.9'
        results = {url: FetchResult.success(BROKEN) for url in (PLAY_URL, APPBRAIN_URL, XPOSED_URL)}

        outcome, fetcher, store = resolve(cascade, app, results)

        assert outcome.error == ErrorKind.MALFORMED_PAGE
        assert outcome.message == MALFORMED_PAGE_MESSAGE
        assert app.latest_version == '0.9'
        assert app.last_check_fatal_error is True

    def test_successful_check_clears_fatal_flag(self, cascade, app):
        app.last_check_fatal_error = True
        results = {PLAY_URL: FetchResult.success(play_page('1.2 (beta)'))}

        outcome, fetcher, store = resolve(cascade, app, results)

        assert outcome.status == CheckStatus.UPDATED
        assert app.latest_version == '1.2 (beta)'
        assert app.last_check_fatal_error is False


class TestCheckingFlag:
    """Tests for the transient currently_checking flag."""

    def test_flag_set_during_each_fetch(self, cascade, app):
        seen = []

        class Watcher(StubFetcher):
            def fetch(self, url_template, package_name, headers=None):
                seen.append(app.currently_checking)
                return super().fetch(url_template, package_name, headers)

        results = {
            PLAY_URL: FetchResult.not_found('No data found'),
            APPBRAIN_URL: FetchResult.success(appbrain_page('1.0')),
        }
        UpdateResolver(cascade, Watcher(results), MemoryStore([app])).resolve(app)

        assert seen == [True, True]
        assert app.currently_checking is False

    def test_flag_cleared_on_exception(self, cascade, app):
        class Exploding(StubFetcher):
            def fetch(self, url_template, package_name, headers=None):
                raise RuntimeError("boom")

        store = MemoryStore([app])

        outcome = UpdateResolver(cascade, Exploding({}), store).resolve(app)

        assert outcome.status == CheckStatus.ERROR
        assert 'boom' in outcome.message
        assert store.updates == []
        assert app.currently_checking is False

    def test_store_failure_leaves_record_untouched(self, cascade, app):
        class FullDiskStore(MemoryStore):
            def update_app(self, record):
                raise OSError("disk full")

        app.latest_version = '0.9'
        results = {PLAY_URL: FetchResult.success(play_page('1.1'))}

        outcome = UpdateResolver(cascade, StubFetcher(results), FullDiskStore([app])).resolve(app)

        assert outcome.status == CheckStatus.ERROR
        assert 'disk full' in outcome.message
        assert app.latest_version == '0.9'
        assert app.last_check_date is None
        assert app.last_check_fatal_error is False
        assert app.currently_checking is False

    def test_no_sources(self, app):
        store = MemoryStore([app])

        outcome = UpdateResolver([], StubFetcher({}), store).resolve(app)

        assert outcome.status == CheckStatus.ERROR
        assert store.updates == []
        assert app.currently_checking is False

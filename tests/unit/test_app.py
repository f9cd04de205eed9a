"""
Unit tests for the command line entry point.
"""
from datetime import datetime, timedelta, timezone

import pytest

from skysweep import app
from skysweep.exceptions import AuthenticationError
from skysweep.memory import InMemoryRecordStore
from skysweep.models import Category
from tests.fixtures.mock_data import TEST_DID, create_mock_record


def parse(*argv):
    return app.build_parser().parse_args(list(argv))


def days_ago(days):
    return datetime.now(timezone.utc) - timedelta(days=days)


@pytest.fixture
def config_path(config_file):
    return config_file(
        {"handle": "a", "password": "b", "baseURL": "https://x", "dayCount": 30}
    )


class TestParser:
    def test_defaults(self):
        args = parse()
        assert not args.only_posts
        assert not args.only_reposts
        assert not args.only_likes
        assert not args.include_likes
        assert not args.dry_run
        assert not args.verbose

    def test_flags(self):
        args = parse("--only-likes", "--include-likes", "--dry-run", "-v")
        assert args.only_likes
        assert args.include_likes
        assert args.dry_run
        assert args.verbose

    def test_unknown_flag_exits(self):
        with pytest.raises(SystemExit):
            parse("--everything")


class TestRun:
    def test_successful_run(self, config_path, output):
        old = create_mock_record(rkey="old", created_at=days_ago(31).isoformat())
        new = create_mock_record(rkey="new", created_at=days_ago(15).isoformat())
        store = InMemoryRecordStore({Category.POST: [old, new]}, did=TEST_DID)
        factory_calls = []

        def factory(base_url):
            factory_calls.append(base_url)
            return store

        status = app.run(parse("--only-posts"), config_path=config_path, store_factory=factory)

        assert status == app.EXIT_OK
        assert factory_calls == ["https://x"]
        assert store.deleted_uris == [old.uri]
        assert "Total posts deleted: 1" in output.lines
        assert "Total posts skipped (newer than 30 days): 1" in output.lines
        assert "Sweep Summary" in output.text

    def test_default_categories(self, config_path, output):
        store = InMemoryRecordStore()

        status = app.run(parse(), config_path=config_path, store_factory=lambda url: store)

        assert status == app.EXIT_OK
        assert [c for c, _ in store.list_calls] == [Category.POST, Category.REPOST]

    def test_config_error(self, tmp_path, output):
        def factory(base_url):
            raise AssertionError("store must not be created")

        status = app.run(
            parse(), config_path=tmp_path / "config.json", store_factory=factory
        )

        assert status == app.EXIT_FAILURE
        assert "Loading config failed" in output.text

    def test_auth_error(self, config_path, output):
        store = InMemoryRecordStore(password="something-else")

        status = app.run(parse(), config_path=config_path, store_factory=lambda url: store)

        assert status == app.EXIT_FAILURE
        assert "Login failed" in output.text
        assert store.list_calls == []

    def test_list_error_aborts(self, config_path, output):
        store = InMemoryRecordStore(
            {Category.POST: [create_mock_record(created_at=days_ago(60).isoformat())]}
        )
        store.fail_lists = {Category.POST}

        status = app.run(parse(), config_path=config_path, store_factory=lambda url: store)

        assert status == app.EXIT_FAILURE
        assert store.deleted == []
        assert "Listing records failed" in output.text

    def test_delete_failures_do_not_change_exit_status(self, config_path, output):
        record = create_mock_record(created_at=days_ago(60).isoformat())
        store = InMemoryRecordStore({Category.POST: [record]})
        store.fail_deletes = {record.uri}

        status = app.run(parse("--only-posts"), config_path=config_path, store_factory=lambda url: store)

        assert status == app.EXIT_OK
        assert "No posts were deleted." in output.lines

    def test_store_is_closed(self, config_path, output):
        store = InMemoryRecordStore(password="nope")
        closed = []
        store.close = lambda: closed.append(True)

        app.run(parse(), config_path=config_path, store_factory=lambda url: store)

        assert closed == [True]

    def test_store_is_closed_after_list_error(self, config_path, output):
        store = InMemoryRecordStore()
        store.fail_lists = {Category.POST}
        closed = []
        store.close = lambda: closed.append(True)

        status = app.run(parse(), config_path=config_path, store_factory=lambda url: store)

        assert status == app.EXIT_FAILURE
        assert closed == [True]

    def test_non_utf8_config_is_a_config_error(self, tmp_path, output):
        path = tmp_path / "config.json"
        path.write_bytes(b'{"handle": "\xff\xfe", "password": "b", "baseURL": "https://x"}')

        status = app.run(
            parse(), config_path=path, store_factory=lambda url: InMemoryRecordStore()
        )

        assert status == app.EXIT_FAILURE
        assert "Loading config failed" in output.text


class TestMain:
    def test_main_uses_run(self, monkeypatch):
        seen = {}

        def fake_run(args):
            seen["args"] = args
            return app.EXIT_OK

        monkeypatch.setattr(app, "run", fake_run)
        monkeypatch.setattr(app, "configure_logging", lambda verbose: None)

        assert app.main(["--only-reposts"]) == app.EXIT_OK
        assert seen["args"].only_reposts

    def test_keyboard_interrupt(self, monkeypatch, output):
        def fake_run(args):
            raise KeyboardInterrupt

        monkeypatch.setattr(app, "run", fake_run)
        monkeypatch.setattr(app, "configure_logging", lambda verbose: None)

        assert app.main([]) == app.EXIT_INTERRUPTED
        assert "Interrupted" in output.text

    def test_auth_error_is_exported(self):
        from skysweep import AuthenticationError as exported

        assert exported is AuthenticationError

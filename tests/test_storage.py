"""Tests for document parsing, configuration and persistence."""

import json
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from unittest.mock import MagicMock

import pytest
import requests
from conftest import make_task

from gantt_mcp.config import GanttConfig, load_config
from gantt_mcp.enums import SnapshotSource
from gantt_mcp.models import GanttSnapshot, default_snapshot
from gantt_mcp.state import GanttState
from gantt_mcp.utils.parsers import DocumentError, _parse_document, _parse_task
from gantt_mcp.utils.storage import (
    LocalCache,
    RemoteStore,
    SnapshotPersister,
    active_config,
    active_remote,
    apply_loaded_document,
    bootstrap,
    load_local,
    reload_remote,
)

# ============================================================================
# Document parsing
# ============================================================================


class TestParseDocument:
    """Tests for _parse_document."""

    def test_parse_task_uses_document_keys(self):
        task = _parse_task({"id": 3, "title": "A", "start": 1, "duration": 2, "parentId": 1, "color": "#fff"})
        assert task.parent_id == 1
        assert task.start == 1.0
        assert task.collapsed is False

    def test_parse_task_keeps_unknown_keys(self):
        task = _parse_task({"id": 3, "title": "A", "owner": "kim"})
        assert task.to_document()["owner"] == "kim"

    def test_bare_array(self):
        patch = _parse_document([{"id": 1, "title": "A", "start": 0, "duration": 2, "parentId": None}])
        assert patch.legacy is True
        assert [t.id for t in patch.tasks] == [1]
        assert patch.start_date is None
        assert patch.duration_weeks is None

    def test_rich_document(self):
        patch = _parse_document(
            {
                "tasks": [{"id": 1, "title": "A"}],
                "projectStartDate": "2026-01-05",
                "projectDurationWeeks": 8,
            }
        )
        assert patch.legacy is False
        assert patch.start_date == date(2026, 1, 5)
        assert patch.duration_weeks == 8

    def test_object_without_tasks(self):
        patch = _parse_document({"projectDurationWeeks": 8})
        assert patch.tasks is None
        assert patch.duration_weeks == 8

    def test_falsy_settings_are_absent(self):
        patch = _parse_document({"tasks": [], "projectStartDate": "", "projectDurationWeeks": 0})
        assert patch.tasks == ()
        assert patch.start_date is None
        assert patch.duration_weeks is None

    def test_json_text(self):
        patch = _parse_document('[{"id": 2, "title": "B"}]')
        assert patch.tasks[0].id == 2

    def test_empty_text_is_empty_array(self):
        assert _parse_document("").tasks == ()

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "42",
            {"tasks": "nope"},
            [{"title": "missing id"}],
            {"tasks": [], "projectStartDate": "someday"},
            {"projectDurationWeeks": -3},
            {"projectDurationWeeks": 100000},
            '[{"id": 1, "start": -3, "duration": -2, "parentId": null}]',
            [{"id": 1, "duration": 0}],
            '[{"id": 1, "start": 0, "duration": 1e400}]',
            '[{"id": 1, "duration": NaN}]',
            [{"id": 1, "start": 600000, "duration": 1}],
            b"\x80[]",
        ],
    )
    def test_malformed(self, raw):
        with pytest.raises(DocumentError):
            _parse_document(raw)


# ============================================================================
# Configuration
# ============================================================================


class TestConfig:
    """Tests for load_config."""

    def test_defaults(self, tmp_path, monkeypatch):
        for name in GanttConfig.model_fields:
            monkeypatch.delenv(f"GANTT_MCP_{name.upper()}", raising=False)
        config = load_config(tmp_path / "missing.yaml")
        assert config.remote_url == "http://localhost:3001/api/tasks"
        assert config.remote_enabled
        assert config.cache_path.name == "geo_gantt_data_v2.json"

    def test_yaml_and_env(self, tmp_path, monkeypatch):
        path = tmp_path / "gantt.yaml"
        path.write_text("remote_url: http://example/api\ntimeout: 3\ncache_path: ~/plan.json\n")
        monkeypatch.setenv("GANTT_MCP_TIMEOUT", "7.5")
        monkeypatch.delenv("GANTT_MCP_REMOTE_URL", raising=False)
        monkeypatch.delenv("GANTT_MCP_CACHE_PATH", raising=False)
        config = load_config(path)
        assert config.remote_url == "http://example/api"
        assert config.timeout == 7.5
        assert not str(config.cache_path).startswith("~")

    def test_empty_remote_url_disables_remote(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GANTT_MCP_REMOTE_URL", "")
        assert not load_config(tmp_path / "missing.yaml").remote_enabled

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "gantt.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_config(path)


# ============================================================================
# Local cache and remote store
# ============================================================================


class TestLocalCache:
    """Tests for LocalCache."""

    def test_missing_file(self, tmp_path):
        assert LocalCache(tmp_path / "cache.json").load() == (True, None)

    def test_save_and_load(self, tmp_path, tree_snapshot):
        cache = LocalCache(tmp_path / "nested" / "cache.json")
        ok, _ = cache.save(tree_snapshot.to_document())
        assert ok
        ok, document = cache.load()
        assert ok
        assert document["projectStartDate"] == "2025-12-08"
        assert len(document["tasks"]) == 6

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text("{broken")
        ok, message = LocalCache(path).load()
        assert ok is False
        assert "Failed to parse" in message

    def test_concurrent_saves_leave_a_readable_file(self, tmp_path):
        cache = LocalCache(tmp_path / "cache.json")
        results = []

        def save(n):
            results.append(cache.save({"tasks": [{"id": n, "title": "x" * 5000}]}))

        threads = [threading.Thread(target=save, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert [ok for ok, _ in results] == [True] * 8
        ok, document = cache.load()
        assert ok
        assert len(document["tasks"]) == 1
        assert not cache.path.with_suffix(".json.tmp").exists()


class TestRemoteStore:
    """Tests for RemoteStore."""

    def test_load(self, mock_session):
        mock_session.get.return_value.json.return_value = [{"id": 1}]
        ok, document = RemoteStore("http://x/api/tasks", mock_session).load()
        assert ok
        assert document == [{"id": 1}]
        assert mock_session.get.call_args[0][0] == "http://x/api/tasks"

    def test_load_network_error(self, mock_session):
        mock_session.get.side_effect = requests.ConnectionError("refused")
        ok, message = RemoteStore("http://x", mock_session).load()
        assert ok is False
        assert "Remote load failed" in message

    def test_load_http_error(self, mock_session):
        mock_session.get.return_value = MagicMock(status_code=500)
        ok, message = RemoteStore("http://x", mock_session).load()
        assert ok is False
        assert "HTTP 500" in message

    def test_load_bad_json(self, mock_session):
        mock_session.get.return_value.json.side_effect = ValueError("bad")
        ok, message = RemoteStore("http://x", mock_session).load()
        assert ok is False
        assert "Failed to parse" in message

    def test_save_posts_document(self, mock_session):
        ok, _ = RemoteStore("http://x", mock_session, timeout=2).save({"tasks": []})
        assert ok
        assert mock_session.post.call_args.kwargs["json"] == {"tasks": []}
        assert mock_session.post.call_args.kwargs["timeout"] == 2

    def test_save_failure(self, mock_session):
        mock_session.post.side_effect = requests.Timeout("slow")
        ok, message = RemoteStore("http://x", mock_session).save({})
        assert ok is False
        assert "Remote save failed" in message


# ============================================================================
# Loading into state
# ============================================================================


class TestApplyLoadedDocument:
    """Tests for the shape-tolerant load rules."""

    def test_array_keeps_settings(self, tree_snapshot):
        snapshot = apply_loaded_document(tree_snapshot, [{"id": 9, "title": "Only"}], SnapshotSource.LOCAL)
        assert [t.id for t in snapshot.tasks] == [9]
        assert snapshot.settings == tree_snapshot.settings

    def test_local_empty_array_clears(self, tree_snapshot):
        snapshot = apply_loaded_document(tree_snapshot, [], SnapshotSource.LOCAL)
        assert snapshot.tasks == ()

    def test_remote_empty_array_is_no_data(self, tree_snapshot):
        assert apply_loaded_document(tree_snapshot, [], SnapshotSource.REMOTE) is None

    def test_remote_object_with_empty_tasks_applies(self, tree_snapshot):
        snapshot = apply_loaded_document(tree_snapshot, {"tasks": []}, SnapshotSource.REMOTE)
        assert snapshot.tasks == ()

    def test_malformed_keeps_current(self, tree_snapshot, caplog):
        assert apply_loaded_document(tree_snapshot, {"tasks": 5}, SnapshotSource.REMOTE) is None
        assert "Ignoring remote document" in caplog.text

    def test_none_and_empty_object(self, tree_snapshot):
        assert apply_loaded_document(tree_snapshot, None, SnapshotSource.LOCAL) is None
        assert apply_loaded_document(tree_snapshot, {}, SnapshotSource.LOCAL) is None


class TestLoadAndReload:
    """Tests for load_local and reload_remote."""

    def test_load_local_does_not_notify(self, tmp_path, two_level_tasks):
        cache = LocalCache(tmp_path / "cache.json")
        cache.save(GanttSnapshot(tasks=two_level_tasks).to_document())
        state = GanttState()
        observer = MagicMock()
        state.subscribe(observer)
        assert load_local(state, cache) is True
        assert [t.id for t in state.snapshot.tasks] == [1, 2]
        observer.assert_not_called()

    def test_load_local_corrupt_falls_back_to_defaults(self, tmp_path, caplog):
        path = tmp_path / "cache.json"
        path.write_text("[oops")
        state = GanttState()
        assert load_local(state, LocalCache(path)) is False
        assert state.snapshot == default_snapshot()

    def test_load_local_rejects_out_of_range_cache(self, tmp_path, caplog):
        path = tmp_path / "cache.json"
        path.write_text('[{"id": 1, "start": 0, "duration": 1e400, "parentId": null}]')
        state = GanttState()
        assert load_local(state, LocalCache(path)) is False
        assert state.snapshot == default_snapshot()
        assert "Ignoring local document" in caplog.text

    def test_reload_remote_replaces(self, mock_session):
        mock_session.get.return_value.json.return_value = {
            "tasks": [{"id": 5, "title": "Remote"}],
            "projectDurationWeeks": 6,
        }
        state = GanttState()
        observer = MagicMock()
        state.subscribe(observer)
        ok, message = reload_remote(state, RemoteStore("http://x", mock_session))
        assert ok
        assert "Loaded 1 task(s)" in message
        assert state.snapshot.settings.duration_weeks == 6
        observer.assert_called_once()
        assert observer.call_args[0][1] == SnapshotSource.REMOTE

    def test_reload_remote_failure_keeps_state(self, mock_session, caplog):
        mock_session.get.side_effect = requests.ConnectionError("down")
        state = GanttState()
        before = state.snapshot
        ok, _ = reload_remote(state, RemoteStore("http://x", mock_session))
        assert ok is False
        assert state.snapshot is before
        assert "Failed to load tasks from remote store" in caplog.text

    def test_reload_remote_empty(self, mock_session):
        mock_session.get.return_value.json.return_value = []
        state = GanttState()
        ok, message = reload_remote(state, RemoteStore("http://x", mock_session))
        assert ok
        assert "no data" in message
        assert state.snapshot == default_snapshot()


# ============================================================================
# Persister
# ============================================================================


class TestSnapshotPersister:
    """Tests for SnapshotPersister."""

    def test_writes_cache_and_remote(self, tmp_path, mock_session, tree_snapshot):
        cache = LocalCache(tmp_path / "cache.json")
        persister = SnapshotPersister(cache, RemoteStore("http://x", mock_session))
        persister(tree_snapshot, SnapshotSource.EDIT)
        persister.flush(timeout=5)
        persister.close()

        assert json.loads(cache.path.read_text())["projectDurationWeeks"] == 12
        assert mock_session.post.call_args.kwargs["json"] == tree_snapshot.to_document()

    def test_remote_reload_not_echoed(self, tmp_path, mock_session, tree_snapshot):
        persister = SnapshotPersister(LocalCache(tmp_path / "c.json"), RemoteStore("http://x", mock_session))
        persister(tree_snapshot, SnapshotSource.REMOTE)
        persister.flush(timeout=5)
        persister.close()
        mock_session.post.assert_not_called()
        assert (tmp_path / "c.json").exists()

    def test_remote_failure_is_logged_not_raised(self, mock_session, tree_snapshot, caplog):
        mock_session.post.return_value = MagicMock(status_code=503)
        persister = SnapshotPersister(None, RemoteStore("http://x", mock_session))
        persister(tree_snapshot, SnapshotSource.EDIT)
        persister.flush(timeout=5)
        persister.close()
        assert "Auto-save failed" in caplog.text

    def test_state_commit_drives_persister(self, tmp_path, tree_snapshot):
        state = GanttState(tree_snapshot)
        cache = LocalCache(tmp_path / "c.json")
        persister = SnapshotPersister(cache, None, executor=ThreadPoolExecutor(max_workers=1))
        state.subscribe(persister)
        state.commit(tree_snapshot.model_copy(update={"tasks": (make_task(1),)}))
        persister.close()
        assert len(json.loads(cache.path.read_text())["tasks"]) == 1


class TestBootstrap:
    """Tests for bootstrap."""

    def test_bootstrap_local_then_remote(self, tmp_path, mock_session, two_level_tasks):
        cache_path = tmp_path / "cache.json"
        LocalCache(cache_path).save([t.to_document() for t in two_level_tasks])
        mock_session.get.return_value.json.return_value = {"tasks": [{"id": 7, "title": "Remote"}]}

        state = GanttState()
        config = GanttConfig(remote_url="http://x/api/tasks", cache_path=cache_path)
        persister = bootstrap(state, config, session=mock_session)

        for thread in threading.enumerate():
            if thread.name == "gantt-remote-load":
                thread.join(timeout=5)
        persister.close()

        assert [t.id for t in state.snapshot.tasks] == [7]
        assert json.loads(cache_path.read_text())["tasks"][0]["id"] == 7

    def test_bootstrap_without_remote(self, tmp_path):
        state = GanttState()
        config = GanttConfig(remote_url="", cache_path=tmp_path / "cache.json")
        persister = bootstrap(state, config)
        assert persister.remote is None
        assert active_config() is config
        assert active_remote() is None
        persister.close()
        assert state.snapshot == default_snapshot()

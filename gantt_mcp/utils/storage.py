"""Two-tier persistence: local cache file and remote document store."""

from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any

import requests

from gantt_mcp.config import GanttConfig
from gantt_mcp.core.mutations import replace_snapshot
from gantt_mcp.enums import SnapshotSource
from gantt_mcp.models.task import DocumentPatch, GanttSnapshot
from gantt_mcp.state import GanttState
from gantt_mcp.utils.parsers import DocumentError, _parse_document

logger = logging.getLogger("gantt_mcp.persistence")

# Set by bootstrap(); tools use them for on-demand reloads and export defaults.
_active_persister: SnapshotPersister | None = None
_active_config: GanttConfig | None = None


class LocalCache:
    """JSON file holding the last saved document."""

    def __init__(self, path: Path):
        self.path = Path(path)
        # One writer at a time through the shared temp file.
        self._lock = threading.Lock()

    def load(self) -> tuple[bool, Any | str]:
        """
        Read the cached document.

        Returns:
            Tuple of (success: bool, document | error: str); a missing file
            is a successful load of ``None``.
        """
        if not self.path.exists():
            return True, None
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            return False, f"Error: Could not read cache {self.path} - {str(e)}"
        try:
            return True, json.loads(text) if text.strip() else None
        except json.JSONDecodeError as e:
            return False, f"Error: Failed to parse cache {self.path} - {str(e)}"

    def save(self, document: Any) -> tuple[bool, str]:
        text = json.dumps(document, indent=2, ensure_ascii=False)
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp = self.path.with_suffix(self.path.suffix + ".tmp")
                tmp.write_text(text, encoding="utf-8")
                tmp.replace(self.path)
            except OSError as e:
                return False, f"Error: Could not write cache {self.path} - {str(e)}"
        return True, str(self.path)


class RemoteStore:
    """Client for the get/replace document endpoint."""

    def __init__(self, url: str, session: requests.Session | None = None, timeout: float = 10.0):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout

    def load(self) -> tuple[bool, Any | str]:
        try:
            response = self.session.get(self.url, headers={"Cache-Control": "no-store"}, timeout=self.timeout)
        except requests.RequestException as e:
            return False, f"Error: Remote load failed - {str(e)}"
        if response.status_code >= 400:
            return False, f"Error: Remote load failed - HTTP {response.status_code}"
        try:
            return True, response.json()
        except ValueError as e:
            return False, f"Error: Failed to parse remote document - {str(e)}"

    def save(self, document: Any) -> tuple[bool, str]:
        try:
            response = self.session.post(self.url, json=document, timeout=self.timeout)
        except requests.RequestException as e:
            return False, f"Error: Remote save failed - {str(e)}"
        if response.status_code >= 400:
            return False, f"Error: Remote save failed - HTTP {response.status_code}"
        return True, "saved"


def _patch_from(document: Any, source: SnapshotSource) -> DocumentPatch | None:
    """Parse a loaded document, returning None when it carries no usable data."""
    if document is None:
        return None
    try:
        patch = _parse_document(document)
    except DocumentError as e:
        logger.warning("Ignoring %s document: %s", source.value, e)
        return None
    # The remote store's bare empty array means "nothing saved yet".
    if source == SnapshotSource.REMOTE and patch.legacy and not patch.tasks:
        return None
    if patch.is_empty:
        return None
    return patch


def apply_loaded_document(
    current: GanttSnapshot, document: Any, source: SnapshotSource
) -> GanttSnapshot | None:
    """Full-state replace from a loaded document, or None to keep ``current``."""
    patch = _patch_from(document, source)
    if patch is None:
        return None
    return replace_snapshot(current, patch)


class SnapshotPersister:
    """
    Observer that saves every committed snapshot.

    The local cache is written synchronously; the remote write is submitted
    to a single background worker and never awaited. Failures are logged and
    leave the in-memory snapshot alone.
    """

    def __init__(
        self,
        cache: LocalCache | None,
        remote: RemoteStore | None,
        executor: ThreadPoolExecutor | None = None,
    ):
        self.cache = cache
        self.remote = remote
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="gantt-save")
        self._pending: list[Future] = []
        self._lock = threading.Lock()

    def __call__(self, snapshot: GanttSnapshot, source: SnapshotSource) -> None:
        document = snapshot.to_document()
        if self.cache is not None:
            ok, message = self.cache.save(document)
            if not ok:
                logger.warning(message)
        # Reloaded data already is the remote copy.
        if self.remote is not None and source != SnapshotSource.REMOTE:
            future = self._executor.submit(self._save_remote, document)
            with self._lock:
                self._pending = [f for f in self._pending if not f.done()]
                self._pending.append(future)

    def _save_remote(self, document: dict) -> bool:
        ok, message = self.remote.save(document)
        if not ok:
            logger.warning("Auto-save failed: %s", message)
        return ok

    def flush(self, timeout: float | None = None) -> None:
        """Wait for pending remote saves."""
        with self._lock:
            pending, self._pending = self._pending, []
        for future in pending:
            future.result(timeout=timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)


def load_local(state: GanttState, cache: LocalCache) -> bool:
    """Seed the state from the cache without triggering a save."""
    ok, document = cache.load()
    if not ok:
        logger.warning(document)
        return False
    snapshot = apply_loaded_document(state.snapshot, document, SnapshotSource.LOCAL)
    if snapshot is None:
        return False
    state.reset(snapshot)
    return True


def reload_remote(state: GanttState, remote: RemoteStore) -> tuple[bool, str]:
    """Fetch the remote document and replace the state if it has data."""
    ok, document = remote.load()
    if not ok:
        logger.warning("Failed to load tasks from remote store: %s", document)
        return False, str(document)
    snapshot = apply_loaded_document(state.snapshot, document, SnapshotSource.REMOTE)
    if snapshot is None:
        return True, "Remote store has no data; keeping current plan."
    state.commit(snapshot, SnapshotSource.REMOTE)
    return True, f"Loaded {len(snapshot.tasks)} task(s) from remote store."


def bootstrap(state: GanttState, config: GanttConfig, session: requests.Session | None = None) -> SnapshotPersister:
    """
    Wire persistence into ``state``.

    Loads the local cache synchronously, subscribes the persister, then
    starts the remote load in the background; when it resolves it replaces
    whatever is current.
    """
    cache = LocalCache(config.cache_path)
    remote = RemoteStore(config.remote_url, session, config.timeout) if config.remote_enabled else None

    global _active_persister, _active_config

    load_local(state, cache)
    persister = SnapshotPersister(cache, remote)
    state.subscribe(persister)
    _active_persister = persister
    _active_config = config

    if remote is not None:
        thread = threading.Thread(target=reload_remote, args=(state, remote), name="gantt-remote-load", daemon=True)
        thread.start()
    return persister


def active_remote() -> RemoteStore | None:
    """Remote store wired by bootstrap(), if any."""
    return _active_persister.remote if _active_persister is not None else None


def active_config() -> GanttConfig:
    """Config wired by bootstrap(), or the defaults when running without it."""
    return _active_config if _active_config is not None else GanttConfig()

"""Export, import and reload tools."""

import json
import logging
from pathlib import Path

from mcp.types import ToolAnnotations

from gantt_mcp.core.mutations import replace_snapshot
from gantt_mcp.enums import SnapshotSource
from gantt_mcp.models.inputs import ExportInput, ImportInput, ReloadInput
from gantt_mcp.server import mcp
from gantt_mcp.state import state
from gantt_mcp.utils.parsers import DocumentError, _parse_document
from gantt_mcp.utils.storage import active_config, active_remote, reload_remote

logger = logging.getLogger("gantt_mcp.documents")


@mcp.tool(
    name="gantt_export",
    annotations=ToolAnnotations(
        title="Export Plan",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def gantt_export(params: ExportInput) -> str:
    """
    Serialize the current plan as JSON.

    By default the document includes the project start date and duration;
    tasks_only emits the bare task array. With a path the JSON is written to
    that file (a directory gets the default export file name).

    Args:
        params: ExportInput containing optional path and tasks_only

    Returns:
        The JSON document, or the path it was written to
    """
    snapshot = state.snapshot
    if params.tasks_only:
        document = [t.to_document() for t in snapshot.tasks]
    else:
        document = snapshot.to_document()
    text = json.dumps(document, indent=2, ensure_ascii=False)

    if not params.path:
        return text

    target = Path(params.path).expanduser()
    if target.is_dir():
        target = target / active_config().export_filename
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as e:
        return f"Error: Could not write {target} - {str(e)}"
    return f"Exported {len(snapshot.tasks)} task(s) to {target}"


@mcp.tool(
    name="gantt_import",
    annotations=ToolAnnotations(
        title="Import Plan",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def gantt_import(params: ImportInput) -> str:
    """
    Replace the current plan with an imported document.

    Accepts either a bare task array (project settings are kept) or a plan
    document with tasks, projectStartDate and projectDurationWeeks. The
    import replaces rather than merges.

    Args:
        params: ImportInput containing document text or a file path

    Returns:
        Confirmation message, or an error if the document is invalid
    """
    if params.path:
        source = Path(params.path).expanduser()
        try:
            raw = source.read_text(encoding="utf-8")
        except OSError as e:
            return f"Error: Could not read {source} - {str(e)}"
        except UnicodeDecodeError as e:
            logger.warning("Rejected import of %s: %s", source, e)
            return f"Error: {source} is not UTF-8 text - {str(e)}\nTip: The current plan was left unchanged."
    else:
        raw = params.document

    try:
        patch = _parse_document(raw)
    except DocumentError as e:
        logger.warning("Rejected import: %s", e)
        return f"Error: {str(e)}\nTip: The current plan was left unchanged."

    if patch.is_empty or (patch.legacy and not patch.tasks):
        return "Error: Document carries no tasks or settings.\nTip: The current plan was left unchanged."

    snapshot = state.commit(replace_snapshot(state.snapshot, patch), SnapshotSource.IMPORT)
    return f"Imported {len(snapshot.tasks)} task(s)."


@mcp.tool(
    name="gantt_reload",
    annotations=ToolAnnotations(
        title="Reload From Remote Store",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def gantt_reload(params: ReloadInput) -> str:
    """
    Reload the plan from the remote store, replacing the in-memory plan.

    There is no merge: whatever the store holds wins. If the store is
    unreachable or empty the current plan is kept.

    Args:
        params: ReloadInput (no parameters required)

    Returns:
        Outcome message
    """
    remote = active_remote()
    if remote is None:
        return "Error: No remote store configured.\nTip: Set GANTT_MCP_REMOTE_URL or remote_url in the config file."

    ok, message = reload_remote(state, remote)
    if not ok:
        return f"{message}\nTip: The current plan was left unchanged."
    return message

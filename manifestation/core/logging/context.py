# manifestation/core/logging/context.py
from __future__ import annotations

from contextvars import ContextVar

__all__ = ["setLogContext", "clearLogContext", "getLogContext"]

# Mod id and pipeline stage attached to every record emitted during a run
_runTags: ContextVar[dict[str, str] | None] = ContextVar("manifestation.runTags", default=None)



def setLogContext(*, modId: str | None = None, stage: str | None = None) -> None:
    """Update the run tags. Passing None for a tag keeps its current value."""
    tags = dict(_runTags.get() or {})
    if modId is not None:
        tags["modId"] = modId
    if stage is not None:
        tags["stage"] = stage
    _runTags.set(tags)



def clearLogContext() -> None:
    _runTags.set(None)



def getLogContext() -> dict[str, str] | None:
    return _runTags.get()

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .lib.manifest import Manifest
    from .lib.toolset import ToolsetLocation

IDLE = "idle"
TOOLSET_READY = "toolset_ready"
MANIFEST_WRITTEN = "manifest_written"
COMPILED = "compiled"
LINKED = "linked"
FAILED = "failed"

# Legal forward moves; FAILED is reachable from anything not terminal.
_NEXT = {
    IDLE: TOOLSET_READY,
    TOOLSET_READY: MANIFEST_WRITTEN,
    MANIFEST_WRITTEN: COMPILED,
    COMPILED: LINKED,
}


class InvalidTransition(RuntimeError):
    pass


@dataclass
class BuildState:
    phase: str = IDLE
    current_step: Optional[str] = None
    completed_steps: List[str] = field(default_factory=list)
    error: Optional[str] = None
    toolset: Optional[ToolsetLocation] = None
    manifest: Optional[Manifest] = None
    artifact: Optional[Path] = None

    @property
    def is_terminal(self) -> bool:
        return self.phase in {LINKED, FAILED}

    def advance(self, phase: str) -> None:
        if _NEXT.get(self.phase) != phase:
            raise InvalidTransition(f"Cannot move from {self.phase} to {phase}")
        self.phase = phase

    def fail(self, error: str) -> None:
        if self.is_terminal:
            raise InvalidTransition(f"Cannot fail from terminal phase {self.phase}")
        self.phase = FAILED
        self.error = error


def mark_completed(state: BuildState, step_id: str) -> None:
    if step_id not in state.completed_steps:
        state.completed_steps.append(step_id)

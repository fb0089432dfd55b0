from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from .build_config import BuildConfig
from .build_state import BuildState, mark_completed
from .build_steps import ALL_STEPS, BuildCtx
from .lib.command import run_process
from .request import InstallerRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    state: BuildState
    artifact: Path
    ran_steps: List[str]


def run_build(
    request: InstallerRequest,
    *,
    cfg: Optional[BuildConfig] = None,
    runner: Callable[..., int] = run_process,
    state: Optional[BuildState] = None,
) -> BuildResult:
    """Turn request into an MSI: toolset, manifest, compile, link.

    Steps run strictly in order. The first failure moves the state to
    'failed', is logged and re-raised; nothing after it runs and the
    intermediate files stay on disk. Pass state to observe the phase
    the pipeline ended in.
    """

    ctx = BuildCtx(request=request, cfg=cfg or BuildConfig(), runner=runner)
    state = state if state is not None else BuildState()
    ran: List[str] = []

    logger.info("=== Build: %s %s ===", request.msi_file_name, request.package_version)
    for step_id, fn in ALL_STEPS:
        state.current_step = step_id
        logger.info("Running step %s", step_id)
        try:
            fn(ctx=ctx, state=state)
        except Exception as e:
            state.fail(str(e))
            logger.error("Step %s failed: %s", step_id, e)
            raise
        mark_completed(state, step_id)
        ran.append(step_id)

    state.current_step = None
    if state.artifact is None:
        raise RuntimeError("link step finished without producing an artifact")
    logger.info("MSI package created successfully: %s", state.artifact)
    return BuildResult(state=state, artifact=state.artifact, ran_steps=ran)

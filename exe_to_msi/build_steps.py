from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .build_config import BuildConfig
from .build_state import COMPILED, LINKED, MANIFEST_WRITTEN, TOOLSET_READY, BuildState
from .lib.command import run_process
from .lib.manifest import generate_manifest
from .lib.toolset import ensure_toolset
from .request import InstallerRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildCtx:
    request: InstallerRequest
    cfg: BuildConfig
    runner: Callable[..., int] = run_process

    @property
    def work_dir(self) -> Path:
        return self.request.work_dir

    @property
    def manifest_path(self) -> Path:
        return self.work_dir / self.cfg.manifest_name

    @property
    def intermediate_path(self) -> Path:
        return self.work_dir / self.cfg.intermediate_name

    @property
    def msi_path(self) -> Path:
        return self.work_dir / self.request.msi_file_name


def step_10_ensure_toolset(*, ctx: BuildCtx, state: BuildState) -> None:
    state.toolset = ensure_toolset(
        ctx.cfg.toolset_dir,
        bundle=ctx.cfg.toolset_bundle,
        compiler_name=ctx.cfg.compiler_name,
        linker_name=ctx.cfg.linker_name,
    )
    state.advance(TOOLSET_READY)


def step_20_generate_manifest(*, ctx: BuildCtx, state: BuildState) -> None:
    state.manifest = generate_manifest(
        ctx.request,
        work_dir=ctx.work_dir,
        manifest_name=ctx.cfg.manifest_name,
        manufacturer=ctx.cfg.manufacturer,
        language=ctx.cfg.language,
    )
    state.advance(MANIFEST_WRITTEN)


def step_30_compile(*, ctx: BuildCtx, state: BuildState) -> None:
    if state.toolset is None or state.manifest is None:
        raise RuntimeError("compile requires a provisioned toolset and a written manifest")

    logger.info("Compiling %s", state.manifest.path.name)
    ctx.runner(
        str(state.toolset.compiler),
        ["-out", str(ctx.intermediate_path), str(state.manifest.path)],
        cwd=str(ctx.work_dir),
    )
    state.advance(COMPILED)


def step_40_link(*, ctx: BuildCtx, state: BuildState) -> None:
    if state.toolset is None:
        raise RuntimeError("link requires a provisioned toolset")

    logger.info("Creating MSI package %s", ctx.msi_path.name)
    ctx.runner(
        str(state.toolset.linker),
        ["-out", str(ctx.msi_path), str(ctx.intermediate_path)],
        cwd=str(ctx.work_dir),
    )
    state.artifact = ctx.msi_path
    state.advance(LINKED)


ALL_STEPS = [
    ("10_ensure_toolset", step_10_ensure_toolset),
    ("20_generate_manifest", step_20_generate_manifest),
    ("30_compile", step_30_compile),
    ("40_link", step_40_link),
]

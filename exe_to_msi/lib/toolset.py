from __future__ import annotations

import logging
import os
import shutil
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path

from .env import NAMES

logger = logging.getLogger(__name__)


class ToolsetResourceMissing(RuntimeError):
    pass


class ExtractionError(RuntimeError):
    pass


@dataclass(frozen=True)
class ToolsetLocation:
    root: Path
    compiler: Path
    linker: Path


def _location(root: Path, compiler_name: str, linker_name: str) -> ToolsetLocation:
    return ToolsetLocation(root=root, compiler=root / compiler_name, linker=root / linker_name)


def _extract_all(bundle: Path, dest: Path) -> None:
    with zipfile.ZipFile(bundle) as zf:
        for info in zf.infolist():
            out = Path(zf.extract(info, dest))
            # zipfile drops unix mode bits; put back the executable ones.
            mode = (info.external_attr >> 16) & 0o777
            if mode and not info.is_dir():
                os.chmod(out, mode)


def ensure_toolset(
    destination: str | Path,
    *,
    bundle: str | Path,
    compiler_name: str = NAMES.compiler,
    linker_name: str = NAMES.linker,
) -> ToolsetLocation:
    """Make sure the compiler/linker pair is unpacked under destination.

    An existing destination directory counts as installed and is returned
    without being touched. Otherwise the bundle is unpacked next to it and
    renamed into place, so an interrupted extraction never looks complete.
    """

    dest = Path(destination)
    if dest.exists():
        logger.info("WiX toolset already installed at %s", dest)
        return _location(dest, compiler_name, linker_name)

    src = Path(bundle)
    if not src.is_file():
        raise ToolsetResourceMissing(f"Failed to find WiX build tools bundle: {src}")

    logger.info("Installing WiX toolset into %s", dest)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{dest.name}-", dir=dest.parent))
    except OSError as e:
        raise ExtractionError(f"Cannot prepare toolset directory {dest}: {e}") from e

    try:
        logger.debug("Extracting %s -> %s", src, staging)
        _extract_all(src, staging)
        os.replace(staging, dest)
    except Exception as e:
        # zlib.error, EOFError and friends surface from corrupt members.
        shutil.rmtree(staging, ignore_errors=True)
        if isinstance(e, OSError) and dest.is_dir():
            # Lost a publish race against a concurrent run; theirs is complete.
            logger.info("WiX toolset published concurrently at %s", dest)
            return _location(dest, compiler_name, linker_name)
        raise ExtractionError(f"Failed to extract {src} into {dest}: {e}") from e

    logger.info("WiX toolset installed successfully")
    return _location(dest, compiler_name, linker_name)

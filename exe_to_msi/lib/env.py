from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

TOOLSET_DIR_ENV = "EXE_TO_MSI_TOOLSET_DIR"


def local_app_data() -> Path:
    base = os.environ.get("LOCALAPPDATA")
    if base:
        return Path(base)
    return Path.home() / "AppData" / "Local"


def toolset_dir_override() -> Optional[Path]:
    override = os.environ.get(TOOLSET_DIR_ENV)
    return Path(override).expanduser() if override else None


def default_toolset_dir() -> Path:
    return local_app_data() / "WiXToolset"


def package_assets_dir() -> Path:
    # exe_to_msi/lib/env.py -> exe_to_msi/assets
    return Path(__file__).resolve().parents[1] / "assets"


@dataclass(frozen=True)
class Names:
    toolset_bundle: str = "wixBuildTools.zip"
    compiler: str = "candle.exe"
    linker: str = "light.exe"
    manifest: str = "setup.wxs"
    intermediate: str = "setup.wixobj"
    msi_suffix: str = ".msi"


NAMES = Names()

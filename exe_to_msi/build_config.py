from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .lib.env import NAMES, default_toolset_dir, package_assets_dir, toolset_dir_override
from .lib.manifest import DEFAULT_LANGUAGE, DEFAULT_MANUFACTURER


@dataclass(frozen=True)
class BuildConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, key: str) -> Dict[str, Any]:
        return self.raw.get(key) or {}

    @property
    def toolset_dir(self) -> Path:
        # EXE_TO_MSI_TOOLSET_DIR > toolset.dir > LOCALAPPDATA default
        override = toolset_dir_override()
        if override is not None:
            return override
        configured = self._section("toolset").get("dir")
        return Path(configured).expanduser() if configured else default_toolset_dir()

    @property
    def toolset_bundle(self) -> Path:
        configured = self._section("toolset").get("bundle")
        if configured:
            return Path(configured).expanduser()
        return package_assets_dir() / NAMES.toolset_bundle

    @property
    def compiler_name(self) -> str:
        return str(self._section("toolset").get("compiler") or NAMES.compiler)

    @property
    def linker_name(self) -> str:
        return str(self._section("toolset").get("linker") or NAMES.linker)

    @property
    def manufacturer(self) -> str:
        return str(self._section("product").get("manufacturer") or DEFAULT_MANUFACTURER)

    @property
    def language(self) -> str:
        return str(self._section("product").get("language") or DEFAULT_LANGUAGE)

    @property
    def manifest_name(self) -> str:
        return str(self._section("outputs").get("manifest") or NAMES.manifest)

    @property
    def intermediate_name(self) -> str:
        return str(self._section("outputs").get("intermediate") or NAMES.intermediate)


def load_build_config(path: Optional[str]) -> BuildConfig:
    if path is None:
        return BuildConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("build config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the build config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{p.name} must contain a mapping/object")

    return BuildConfig(raw=raw)

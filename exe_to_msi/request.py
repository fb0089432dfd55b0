from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from .lib.env import NAMES

VERSION_RE = re.compile(r"\d+\.\d+\.\d+\.\d+")

# Characters XML 1.0 does not allow, even escaped.
XML_ILLEGAL_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


class InvalidRequest(ValueError):
    pass


def normalize_package_name(name: str) -> str:
    """Strip any trailing .msi suffix (case-insensitive). Idempotent."""

    n = name.strip()
    suffix = NAMES.msi_suffix
    while n.lower().endswith(suffix):
        n = n[: -len(suffix)].rstrip()
    return n


@dataclass(frozen=True)
class InstallerRequest:
    """Everything one build needs. Built once, never mutated."""

    exe_path: str
    exe_arguments: str
    package_name: str
    package_version: str

    def __post_init__(self) -> None:
        name = normalize_package_name(self.package_name)
        if not name:
            raise InvalidRequest(f"Invalid MSI name: {self.package_name!r}")
        object.__setattr__(self, "package_name", name)

        for field_name in ("exe_path", "exe_arguments", "package_name"):
            bad = XML_ILLEGAL_RE.search(getattr(self, field_name))
            if bad:
                raise InvalidRequest(f"{field_name} contains a character not allowed in XML: {bad.group()!r}")

        if not VERSION_RE.fullmatch(self.package_version):
            raise InvalidRequest(
                f"Invalid MSI version {self.package_version!r}; expected format 'A.B.C.D'"
            )

    @classmethod
    def create(
        cls,
        *,
        exe_path: str,
        exe_arguments: str | None,
        package_name: str,
        package_version: str,
    ) -> "InstallerRequest":
        """Validate raw CLI values and build a request."""

        p = Path(exe_path).expanduser()
        if not p.is_file():
            raise InvalidRequest(f"Executable not found: {exe_path}")

        return cls(
            exe_path=str(p.resolve()),
            exe_arguments=(exe_arguments or "").strip('"'),
            package_name=package_name,
            package_version=package_version.strip(),
        )

    @property
    def msi_file_name(self) -> str:
        return self.package_name + NAMES.msi_suffix

    @property
    def exe_name(self) -> str:
        return Path(self.exe_path).name

    @property
    def work_dir(self) -> Path:
        return Path(self.exe_path).parent

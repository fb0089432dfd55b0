import logging
import sys
import zipfile
from pathlib import Path

import pytest

from exe_to_msi.build_config import BuildConfig
from exe_to_msi.lib.env import TOOLSET_DIR_ENV
from exe_to_msi.request import InstallerRequest

# Stands in for candle.exe / light.exe: honours "-out <output> <input>".
FAKE_TOOL = """#!{python}
import sys

args = sys.argv[1:]
out = args[args.index("-out") + 1]
src = args[-1]
with open(src, "rb") as f:
    data = f.read()
with open(out, "wb") as f:
    f.write(b"{tag}:" + data[:32])
print("{tag} wrote", out)
"""


@pytest.fixture(autouse=True)
def _no_toolset_dir_override(monkeypatch):
    monkeypatch.delenv(TOOLSET_DIR_ENV, raising=False)


@pytest.fixture(autouse=True)
def _reset_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in root.handlers[:]:
        # Only what configure_logging added; pytest keeps its own capture handlers here.
        if h not in handlers and type(h) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    for attr in ("_exe_to_msi_configured", "_exe_to_msi_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


def write_bundle(path: Path, files: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, (content, mode) in files.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = (mode & 0o777) << 16
            zf.writestr(info, content)
    return path


@pytest.fixture
def exe_file(tmp_path):
    work = tmp_path / "work"
    work.mkdir()
    exe = work / "setup.exe"
    exe.write_bytes(b"MZ fake installer")
    return exe


@pytest.fixture
def request_for(exe_file):
    def _make(name="App", version="1.0.0.1", arguments=""):
        return InstallerRequest.create(
            exe_path=str(exe_file),
            exe_arguments=arguments,
            package_name=name,
            package_version=version,
        )

    return _make


@pytest.fixture
def tool_bundle(tmp_path):
    python = sys.executable
    return write_bundle(
        tmp_path / "bundle" / "wixBuildTools.zip",
        {
            "candle.exe": (FAKE_TOOL.format(python=python, tag="WIXOBJ"), 0o755),
            "light.exe": (FAKE_TOOL.format(python=python, tag="MSI"), 0o755),
            "wix.dll": ("not really a dll", 0o644),
        },
    )


@pytest.fixture
def provisioned_cfg(tmp_path):
    toolset = tmp_path / "cache" / "WiXToolset"
    toolset.mkdir(parents=True)
    return BuildConfig(raw={"toolset": {"dir": str(toolset), "bundle": str(tmp_path / "missing.zip")}})

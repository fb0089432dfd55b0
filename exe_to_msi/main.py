from __future__ import annotations

import argparse
import logging
import sys
import traceback
from typing import Callable, Optional

from .build import run_build
from .build_config import load_build_config
from .lib.command import run_process
from .logging_utils import configure_logging
from .request import InstallerRequest

logger = logging.getLogger(__name__)


def run(
    *,
    exe_path: str,
    exe_arguments: Optional[str],
    msi_name: str,
    msi_version: str,
    debug: bool = False,
    config_path: Optional[str] = None,
    log_path: Optional[str] = None,
    runner: Callable[..., int] = run_process,
) -> int:
    """Create an .msi wrapping exe_path. Returns the process exit code."""

    try:
        configure_logging(level=logging.DEBUG if debug else logging.INFO, log_path=log_path)
    except Exception as e:
        print(f"Exception on logger creation: {e}", file=sys.stderr)
        traceback.print_exc()
        return 1

    try:
        cfg = load_build_config(config_path)
        request = InstallerRequest.create(
            exe_path=exe_path,
            exe_arguments=exe_arguments,
            package_name=msi_name,
            package_version=msi_version,
        )
        run_build(request, cfg=cfg, runner=runner)
    except Exception:
        logger.exception("Exception during process run")
        return 1

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="exe-to-msi",
        description="Creates a .msi from a provided .exe installer.",
    )
    p.add_argument("--debug", action="store_true", help="Write out debug logging")
    p.add_argument("--exe-file-path", required=True, help="File path to the executable")
    p.add_argument("--exe-arguments", default="", help="Arguments to call during the exe run")
    p.add_argument(
        "--msi-name",
        required=True,
        help="Name of the msi file. Also the name of the installed app in windows",
    )
    p.add_argument("--msi-version", required=True, help="Version of the .msi. Should be format 'A.B.C.D'")
    p.add_argument("--config", default=None, help="Optional YAML build config")
    p.add_argument("--log", default=None, help="Also write the log to this file")

    args = p.parse_args(argv)

    return run(
        exe_path=args.exe_file_path,
        exe_arguments=args.exe_arguments,
        msi_name=args.msi_name,
        msi_version=args.msi_version,
        debug=bool(args.debug),
        config_path=args.config,
        log_path=args.log,
    )


if __name__ == "__main__":
    raise SystemExit(main())

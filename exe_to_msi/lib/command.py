from __future__ import annotations

import logging
import subprocess
import threading
from typing import IO, Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

LineSink = Callable[[str], None]

# Only defined on Windows; keeps candle/light from flashing a console.
_CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0)


class ProcessFailed(RuntimeError):
    def __init__(self, exit_code: int, argv: Sequence[str]):
        self.exit_code = exit_code
        self.argv = list(argv)
        super().__init__(f"Process failed with exit code {exit_code}: {_fmt_argv(self.argv)}")


def _fmt_argv(argv: Sequence[str]) -> str:
    return subprocess.list2cmdline(list(argv))


def _log_stdout(line: str) -> None:
    logger.info("%s", line)


def _log_stderr(line: str) -> None:
    logger.warning("%s", line)


def _pump(stream: IO[str], sink: LineSink, errors: List[BaseException]) -> None:
    with stream:
        try:
            for line in stream:
                sink(line.rstrip("\r\n"))
        except Exception as e:
            errors.append(e)
            # Keep draining so the child never blocks on a full pipe.
            for _ in stream:
                pass


def run_process(
    executable: str,
    args: Sequence[str],
    *,
    cwd: str,
    stdout_sink: Optional[LineSink] = None,
    stderr_sink: Optional[LineSink] = None,
) -> int:
    """Run an external tool, streaming its output line by line.

    stdout and stderr are drained by two reader threads while the child runs,
    so a chatty tool can never block on a full pipe. Both readers are joined
    before the exit code is looked at.

    An exception raised by a sink is re-raised here once the child has
    exited. Raises ProcessFailed on a non-zero exit code.
    """

    argv = [str(executable), *[str(a) for a in args]]
    logger.info("CMD %s", _fmt_argv(argv))

    p = subprocess.Popen(
        argv,
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        stdin=subprocess.DEVNULL,
        text=True,
        encoding="utf-8",
        errors="replace",
        creationflags=_CREATE_NO_WINDOW,
    )

    errors: List[BaseException] = []
    readers = [
        threading.Thread(target=_pump, args=(p.stdout, stdout_sink or _log_stdout, errors), name="stdout-reader", daemon=True),
        threading.Thread(target=_pump, args=(p.stderr, stderr_sink or _log_stderr, errors), name="stderr-reader", daemon=True),
    ]
    for t in readers:
        t.start()
    for t in readers:
        t.join()

    returncode = p.wait()
    logger.debug("Exit code %s from %s", returncode, argv[0])

    if errors:
        raise errors[0]

    if returncode != 0:
        raise ProcessFailed(returncode, argv)
    return returncode

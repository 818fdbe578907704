"""Process gateway — the single seam between repopulse and external tools.

Everything that shells out (``git``, ``gh``) goes through an object with an
``invoke(args, cwd)`` method, so scan and resolve logic can be exercised
against canned output in tests.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Protocol, Sequence

from repopulse.git.models import ProcessResult

EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124
EXIT_OS_ERROR = 126


class ProcessGateway(Protocol):
    def invoke(self, args: Sequence[str], cwd: Path) -> ProcessResult: ...


class SubprocessGateway:
    """Run commands with :func:`subprocess.run`. Never raises."""

    def __init__(self, timeout: float = 120) -> None:
        self.timeout = timeout

    def invoke(self, args: Sequence[str], cwd: Path) -> ProcessResult:
        argv = list(args)
        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError:
            return ProcessResult(
                exit_code=EXIT_NOT_FOUND,
                stderr=f"{argv[0]} is not installed or not on PATH",
            )
        except subprocess.TimeoutExpired:
            return ProcessResult(
                exit_code=EXIT_TIMEOUT,
                stderr=f"command timed out after {self.timeout}s: {' '.join(argv)}",
            )
        except OSError as exc:
            return ProcessResult(exit_code=EXIT_OS_ERROR, stderr=str(exc))

        return ProcessResult(
            exit_code=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

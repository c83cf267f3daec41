"""
L4 Execution — Core command runner.

The SINGLE PLACE where ``subprocess`` is called for effectful
install steps.  In preview mode nothing is executed: the step is
rendered through the progress callback and a ``previewed`` result is
returned.

Long-running steps (package installs, builds) run without a timeout;
only termination of the whole process stops them.

With ``stream_output`` each output line is passed to the progress
callback as it arrives (level ``output``; stderr merged into stdout).
Either way only the tail of the output is kept on the result.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import threading
import time
from collections import deque
from collections.abc import Callable
from pathlib import Path

from gmx_installer.core.models.result import StepResult

logger = logging.getLogger(__name__)

# (level, message); level is one of:
#   info, success, warning, error, dry_run, command, output
ProgressCallback = Callable[[str, str], None]

_LOG_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "dry_run": logging.INFO,
    "command": logging.INFO,
    "output": logging.DEBUG,
}

# Keep only the tail of captured output.
_OUTPUT_TAIL = 4000
_STREAM_TAIL_LINES = 200


def log_progress(level: str, message: str) -> None:
    """Default progress sink: the module logger."""
    logger.log(_LOG_LEVELS.get(level, logging.INFO), message)


def format_command(cmd: list[str]) -> str:
    return shlex.join(cmd)


class CommandRunner:
    """Run (or, in preview mode, render) external commands.

    Args:
        dry_run: Render steps instead of executing them.
        use_sudo: Prefix root-requiring commands with ``sudo`` when not
            already running as root.
        on_progress: Callback receiving ``(level, message)`` pairs.
        stream_output: Pass command output to ``on_progress`` line by
            line while it runs.
    """

    def __init__(
        self,
        *,
        dry_run: bool = False,
        use_sudo: bool = True,
        on_progress: ProgressCallback | None = None,
        stream_output: bool = False,
    ) -> None:
        self.dry_run = dry_run
        self.stream_output = stream_output
        self.use_sudo = use_sudo
        self.on_progress: ProgressCallback = on_progress or log_progress
        self.history: list[StepResult] = []

    # ── Reporting ───────────────────────────────────────────────

    def report(self, level: str, message: str) -> None:
        self.on_progress(level, message)

    def preview(self, description: str, detail: str = "") -> StepResult:
        """Record and render a step that preview mode does not perform."""
        self.report("dry_run", description)
        if detail:
            self.report("command", detail)
        result = StepResult.preview(description, output=detail)
        self.history.append(result)
        return result

    # ── Execution ───────────────────────────────────────────────

    def _with_sudo(self, cmd: list[str], needs_sudo: bool) -> list[str]:
        if needs_sudo and self.use_sudo and os.geteuid() != 0:
            return ["sudo"] + cmd
        return cmd

    def run(
        self,
        cmd: list[str],
        description: str,
        *,
        cwd: Path | str | None = None,
        needs_sudo: bool = False,
        timeout: int | None = None,
    ) -> StepResult:
        """Execute ``cmd`` and capture the outcome.

        Never raises for a failed command: the failure is in the
        returned ``StepResult`` and the caller decides whether it is
        fatal.
        """
        cmd = self._with_sudo(list(cmd), needs_sudo)
        rendered = format_command(cmd)

        if self.dry_run:
            result = StepResult.preview(description, command=cmd, output=rendered)
            self.report("dry_run", description)
            self.report("command", rendered)
            self.history.append(result)
            return result

        self.report("info", description)
        logger.debug("Executing: %s (cwd=%s)", rendered, cwd)
        start = time.monotonic()

        workdir = str(cwd) if cwd is not None else None
        try:
            if self.stream_output:
                returncode, stdout, stderr = self._stream(cmd, workdir, timeout)
            else:
                proc = subprocess.run(
                    cmd,
                    cwd=workdir,
                    capture_output=True,
                    text=True,
                    timeout=timeout,
                )
                returncode, stdout, stderr = proc.returncode, proc.stdout or "", proc.stderr or ""
        except subprocess.TimeoutExpired:
            result = StepResult.failure(
                description, f"Command timed out ({timeout}s)", command=cmd,
            )
        except OSError as e:
            result = StepResult.failure(
                description, f"Command execution error: {e}", command=cmd,
            )
        else:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            stdout = stdout[-_OUTPUT_TAIL:]
            stderr = stderr[-_OUTPUT_TAIL:]
            if returncode == 0:
                result = StepResult.success(
                    description, output=stdout, command=cmd, duration_ms=elapsed_ms,
                    metadata={"stderr": stderr},
                )
            else:
                result = StepResult.failure(
                    description,
                    f"Command failed (exit {returncode})",
                    command=cmd,
                    output=stdout,
                    duration_ms=elapsed_ms,
                    metadata={"stderr": stderr, "return_code": returncode},
                )

        if result.failed:
            logger.debug("Step '%s' failed: %s", description, result.error)
        self.history.append(result)
        return result

    def _stream(
        self, cmd: list[str], cwd: str | None, timeout: int | None,
    ) -> tuple[int, str, str]:
        """Run ``cmd``, reporting each output line as it arrives.

        stderr is merged into stdout, so the returned stderr is empty.

        Raises:
            subprocess.TimeoutExpired: ``timeout`` elapsed; the process
                was killed.
            OSError: The command could not be started.
        """
        tail: deque[str] = deque(maxlen=_STREAM_TAIL_LINES)
        expired = threading.Event()

        with subprocess.Popen(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        ) as proc:

            def _kill() -> None:
                expired.set()
                proc.kill()

            timer = threading.Timer(timeout, _kill) if timeout else None
            if timer:
                timer.start()
            try:
                if proc.stdout:
                    for line in proc.stdout:
                        tail.append(line)
                        self.report("output", line.rstrip("\n"))
                returncode = proc.wait()
            finally:
                if timer:
                    timer.cancel()

        if expired.is_set():
            raise subprocess.TimeoutExpired(cmd, timeout)
        return returncode, "".join(tail), ""

from __future__ import annotations

import os
import shlex
import shutil
import signal
import subprocess
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import requests

from shadcn_registry.console import TaskLog, info
from shadcn_registry.errors import CommandFailed, ServerNotReady

COMMAND_NOT_FOUND_EXIT_CODE = 127


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int
    log: list[str]


class LineRelay:
    """Split streamed text into lines, holding back a trailing partial line until it is completed or flushed."""

    def __init__(self, emit: Callable[[str], None]) -> None:
        self._emit = emit
        self._buffer = ""

    def feed(self, text: str) -> None:
        self._buffer += text
        *complete, self._buffer = self._buffer.split("\n")
        for line in complete:
            self._emit_line(line)

    def flush(self) -> None:
        rest, self._buffer = self._buffer, ""
        self._emit_line(rest)

    def _emit_line(self, line: str) -> None:
        line = line.rstrip("\r")
        if line.strip():
            self._emit(line)


def to_argv(cmd: str | list[str]) -> list[str]:
    if isinstance(cmd, str):
        argv = shlex.split(cmd, posix=os.name != "nt")
    else:
        argv = list(cmd)
    if not argv:
        raise ValueError("Internal error: empty command")
    return argv


def _resolve_argv(argv: list[str]) -> list[str]:
    """Resolve argv[0] via PATH for cross-platform execution.

    On Windows, `npm`, `npx`, `pnpm` and `bunx` are usually `.cmd` shims. `subprocess` cannot execute `.cmd`/`.bat`
    files directly, so we invoke them via `cmd.exe /c`.
    """
    cmd = argv[0]
    if any(sep and sep in cmd for sep in ("/", "\\", os.path.sep, os.path.altsep)):
        return argv

    resolved = shutil.which(cmd)
    if resolved is None:
        return argv

    if os.name == "nt":
        suffix = Path(resolved).suffix.lower()
        if suffix in {".cmd", ".bat"}:
            comspec = os.environ.get("ComSpec", "cmd.exe")
            return [comspec, "/d", "/c", resolved, *argv[1:]]

    return [resolved, *argv[1:]]


def run_command(
    cmd: str | list[str],
    *,
    cwd: Path,
    description: str,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Run `cmd` in `cwd`, streaming its combined stdout/stderr into a task log.

    Raises `CommandFailed` (carrying the exit code and every relayed line) when the exit status is non-zero.
    There is no timeout.
    """
    argv = to_argv(cmd)
    task = TaskLog(description)
    relay = LineRelay(task.message)
    try:
        proc = subprocess.Popen(  # noqa: S603
            _resolve_argv(argv),
            cwd=str(cwd),
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as exc:
        task.failure()
        raise CommandFailed(
            f"Command not found: {argv[0]!r}. Ensure it is installed and on PATH.",
            exit_code=COMMAND_NOT_FOUND_EXIT_CODE,
            log=task.lines,
        ) from exc
    except OSError as exc:
        task.failure()
        raise CommandFailed(
            f"Failed to execute {argv[0]!r}: {exc}", exit_code=COMMAND_NOT_FOUND_EXIT_CODE, log=task.lines
        ) from exc

    try:
        assert proc.stdout is not None
        for chunk in iter(proc.stdout.readline, ""):
            relay.feed(chunk)
        relay.flush()
    except BaseException:
        proc.kill()
        proc.wait()
        raise

    returncode = proc.wait()
    if returncode != 0:
        task.failure()
        raise CommandFailed(
            f"{description.rstrip('.')} failed: `{' '.join(argv)}` exited with code {returncode}",
            exit_code=returncode,
            log=task.lines,
        )
    task.success()
    return CommandResult(argv=argv, returncode=returncode, log=task.lines)


@dataclass
class BackgroundProcess:
    argv: list[str]
    proc: subprocess.Popen[str]
    reader: threading.Thread | None = None
    log: list[str] = field(default_factory=list)

    @property
    def pid(self) -> int:
        return self.proc.pid

    def poll(self) -> int | None:
        return self.proc.poll()

    def terminate(self) -> None:
        """Stop the process and its children. Best effort: an already-exited process is not an error."""
        if self.proc.poll() is not None:
            return
        try:
            if os.name == "nt":
                self.proc.terminate()
            else:
                os.killpg(self.proc.pid, signal.SIGTERM)
        except OSError:
            # Already gone (ProcessLookupError) or not ours to signal.
            return
        try:
            self.proc.wait(timeout=10)
        except subprocess.TimeoutExpired:
            self.proc.kill()
            self.proc.wait()
        if self.reader is not None:
            self.reader.join(timeout=1)


def start_background(cmd: str | list[str], *, cwd: Path, label: str) -> BackgroundProcess:
    """Start `cmd` detached in its own process group and relay its output without waiting for it."""
    argv = to_argv(cmd)
    kwargs: dict[str, object] = {}
    if os.name == "nt":
        kwargs["creationflags"] = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0)
    else:
        kwargs["start_new_session"] = True
    try:
        proc = subprocess.Popen(  # noqa: S603
            _resolve_argv(argv),
            cwd=str(cwd),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            **kwargs,  # type: ignore[arg-type]
        )
    except OSError as exc:
        raise CommandFailed(
            f"Failed to start {label}: {argv[0]!r}: {exc}", exit_code=COMMAND_NOT_FOUND_EXIT_CODE
        ) from exc

    background = BackgroundProcess(argv=argv, proc=proc)

    def _emit(line: str) -> None:
        background.log.append(line)
        info(f"[{label}] {line}")

    def _stream_stdout() -> None:
        if proc.stdout is None:
            return
        relay = LineRelay(_emit)
        for chunk in iter(proc.stdout.readline, ""):
            relay.feed(chunk)
        relay.flush()

    background.reader = threading.Thread(target=_stream_stdout, daemon=True)
    background.reader.start()
    return background


def wait_for_http(
    url: str,
    *,
    timeout_seconds: float,
    interval_seconds: float = 0.5,
    process: BackgroundProcess | None = None,
) -> None:
    """Poll `url` until the server answers with any HTTP response.

    Raises `ServerNotReady` after `timeout_seconds`, or `CommandFailed` if `process` exits first.
    """
    deadline = time.monotonic() + timeout_seconds
    last_error = "no attempt made"
    while True:
        if process is not None:
            code = process.poll()
            if code is not None:
                raise CommandFailed(
                    f"Server process `{' '.join(process.argv)}` exited with code {code} before becoming ready",
                    exit_code=code,
                    log=process.log,
                )
        try:
            requests.get(url, timeout=max(0.5, min(5.0, interval_seconds * 4)))
            return
        except requests.RequestException as exc:
            last_error = str(exc)
        if time.monotonic() >= deadline:
            raise ServerNotReady(
                f"Server at {url} did not respond within {timeout_seconds:.0f}s (last error: {last_error})"
            )
        time.sleep(interval_seconds)

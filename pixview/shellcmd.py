"""Running shell commands and composing them from templates."""

from __future__ import annotations

import os
import re
import selectors
import subprocess
import time
from dataclasses import dataclass

#: Interval between checks of the child process state, in seconds.
POLLING_INTERVAL = 0.01
#: Default time a child may stay silent before it is considered hung, in seconds.
PROCESS_TIMEOUT = 10.0

_READ_SIZE = 4096
_TEMPLATE_MARK = re.compile(r"%(%?)")


@dataclass(frozen=True)
class ShellResult:
    """Outcome of a finished shell command."""

    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ShellTimeoutError(TimeoutError):
    """The child process produced no output and did not exit in time."""

    def __init__(self, cmd: str, timeout: float, stdout: bytes, stderr: bytes):
        super().__init__(f"command timed out after {timeout:g}s: {cmd}")
        self.cmd = cmd
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr


def _shell() -> str:
    return os.environ.get("SHELL") or "/bin/sh"


def run_shell(cmd: str, timeout: float = PROCESS_TIMEOUT) -> ShellResult:
    """Run ``cmd`` through the user's shell and collect its output.

    The timeout is an inactivity limit: it restarts whenever the child
    writes something. Raises ValueError for an empty command,
    ShellTimeoutError when the limit is hit and ChildProcessError when
    the child is terminated by a signal.
    """
    if not cmd:
        raise ValueError("empty command")

    shell = _shell()
    out = bytearray()
    err = bytearray()

    with subprocess.Popen(
        [shell, "-c", cmd],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    ) as proc:
        buffers = {proc.stdout: out, proc.stderr: err}

        def expire() -> ShellTimeoutError:
            proc.kill()
            proc.wait()
            return ShellTimeoutError(cmd, timeout, bytes(out), bytes(err))

        last_activity = time.monotonic()
        exited = False
        with selectors.DefaultSelector() as sel:
            for stream in buffers:
                sel.register(stream, selectors.EVENT_READ)

            while sel.get_map():
                events = sel.select(POLLING_INTERVAL)
                if not events:
                    if proc.poll() is not None:
                        exited = True
                        break
                    if time.monotonic() - last_activity > timeout:
                        raise expire()
                    continue

                last_activity = time.monotonic()
                for key, _ in events:
                    data = os.read(key.fd, _READ_SIZE)
                    if data:
                        buffers[key.fileobj] += data
                    else:
                        sel.unregister(key.fileobj)

        if not exited:
            remaining = max(timeout - (time.monotonic() - last_activity), 0.0)
            try:
                proc.wait(timeout=remaining)
            except subprocess.TimeoutExpired:
                raise expire() from None

        returncode = proc.returncode

    if returncode < 0:
        raise ChildProcessError(
            f"command terminated by signal {-returncode}: {cmd}"
        )
    return ShellResult(returncode, bytes(out), bytes(err))


def expand_expression(expr: str, path: str) -> str:
    """Build a command from a template.

    Every ``%`` is replaced with ``path``; ``%%`` stands for a literal
    percent sign. An empty string means there is nothing to run.
    """
    return _TEMPLATE_MARK.sub(lambda m: "%" if m.group(1) else path, expr)
"""Child processes with piped standard input, output and error."""

from __future__ import annotations

import os
import subprocess
from typing import IO, Any

from .values import NekoError


def _check_int(v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise NekoError("Invalid argument")
    return v


def _check_range(size: int, pos: Any, length: Any) -> tuple[int, int]:
    p, n = _check_int(pos), _check_int(length)
    if p < 0 or n < 0 or p + n > size:
        raise NekoError("Invalid range")
    return p, n


class Process:
    """A started child process; every operation after close() raises NekoError."""

    def __init__(self, popen: subprocess.Popen) -> None:
        self._popen = popen
        self._closed = False

    def _proc(self) -> subprocess.Popen:
        if self._closed:
            raise NekoError("Process is closed")
        return self._popen

    def __enter__(self) -> Process:
        return self

    def __exit__(self, *exc: object) -> None:
        if not self._closed:
            self.close()

    @property
    def pid(self) -> int:
        """The process id."""
        return self._proc().pid

    def _read(self, stream: IO[bytes] | None, buf: bytearray, pos: Any, length: Any) -> int:
        if not isinstance(buf, bytearray):
            raise NekoError("Invalid argument")
        start, n = _check_range(len(buf), pos, length)
        if stream is None or stream.closed:
            raise NekoError("Stream is closed")
        try:
            data = os.read(stream.fileno(), n)
        except OSError:
            raise NekoError("Read error") from None
        if not data:
            raise NekoError("End of stream")
        buf[start:start + len(data)] = data
        return len(data)

    def stdout_read(self, buf: bytearray, pos: int, length: int) -> int:
        """Read up to length bytes of the child's stdout into buf at pos; raise at end."""
        return self._read(self._proc().stdout, buf, pos, length)

    def stderr_read(self, buf: bytearray, pos: int, length: int) -> int:
        """Read up to length bytes of the child's stderr into buf at pos; raise at end."""
        return self._read(self._proc().stderr, buf, pos, length)

    def stdin_write(self, buf: bytes | bytearray | str, pos: int, length: int) -> int:
        """Write up to length bytes of buf from pos to the child's stdin; return the count."""
        stream = self._proc().stdin
        if isinstance(buf, str):
            buf = buf.encode("utf-8")
        if not isinstance(buf, (bytes, bytearray)):
            raise NekoError("Invalid argument")
        start, n = _check_range(len(buf), pos, length)
        if stream is None or stream.closed:
            raise NekoError("Stream is closed")
        try:
            return os.write(stream.fileno(), bytes(buf[start:start + n]))
        except OSError:
            raise NekoError("Write error") from None

    def stdin_close(self) -> None:
        """Close the child's standard input."""
        stream = self._proc().stdin
        if stream is None or stream.closed:
            raise NekoError("Stream is closed")
        try:
            stream.close()
        except OSError:
            raise NekoError("Close error") from None

    def exit(self) -> int:
        """Wait for the child to end and return its exit code."""
        p = self._proc()
        try:
            code = p.wait()
        except OSError:
            raise NekoError("Wait error") from None
        if code < 0 and os.name != "nt":
            raise NekoError(f"process killed by signal {-code}")
        return code

    def close(self) -> None:
        """Close the pipes to the child."""
        p = self._proc()
        self._closed = True
        for stream in (p.stderr, p.stdout, p.stdin):
            if stream is not None and not stream.closed:
                try:
                    stream.close()
                except OSError:
                    pass

    def kill(self) -> None:
        """Terminate the child forcibly."""
        p = self._proc()
        try:
            p.kill()
        except OSError:
            pass


def process_run(cmd: str, args: list[str] | None) -> Process:
    """Start a process.

    With args, cmd is run directly with those arguments; with args None,
    cmd is handed to the system shell as is.
    """
    if not isinstance(cmd, str):
        raise NekoError("Invalid argument")
    argv: str | list[str]
    if args is None:
        if os.name == "nt":
            shell = os.environ.get("COMSPEC") or "cmd.exe"
            argv = f'"{shell}" /C "{cmd}"'
        else:
            argv = ["/bin/sh", "-c", cmd]
    else:
        if not isinstance(args, (list, tuple)):
            raise NekoError("Invalid argument")
        if not all(isinstance(a, str) for a in args):
            raise NekoError("Invalid argument")
        argv = [cmd, *args]
    try:
        popen = subprocess.Popen(
            argv,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=0,
        )
    except (OSError, ValueError):
        raise NekoError(f"Command not found : {cmd}") from None
    return Process(popen)
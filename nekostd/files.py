"""Buffered file I/O over named files and the standard streams."""

from __future__ import annotations

import sys
from typing import Any, BinaryIO

from .values import NekoError


class FileError(NekoError):
    """A failed file operation; its value is [operation, file name]."""

    def __init__(self, operation: str, name: str) -> None:
        super().__init__([operation, name])
        self.operation = operation
        self.name = name


def _check_int(v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise NekoError("Invalid argument")
    return v


def _check_range(size: int, pos: Any, length: Any) -> tuple[int, int]:
    p, n = _check_int(pos), _check_int(length)
    if p < 0 or n < 0 or p > size or p + n > size:
        raise NekoError("Invalid range")
    return p, n


class NekoFile:
    """An open file; every operation after close() raises NekoError."""

    def __init__(self, name: str, io: BinaryIO) -> None:
        self._name = name
        self._io: BinaryIO | None = io
        self._eof = False

    @property
    def name(self) -> str:
        """The name the file was opened with."""
        return self._name

    @property
    def closed(self) -> bool:
        return self._io is None

    def _file(self) -> BinaryIO:
        if self._io is None:
            raise NekoError("File is closed")
        return self._io

    def __enter__(self) -> NekoFile:
        return self

    def __exit__(self, *exc: object) -> None:
        if self._io is not None:
            self.close()

    def close(self) -> None:
        """Close the file."""
        f = self._file()
        self._io = None
        f.close()

    def write(self, s: bytes | bytearray | str, pos: int, length: int) -> int:
        """Write s[pos:pos+length] completely and return length."""
        f = self._file()
        if isinstance(s, str):
            s = s.encode("utf-8")
        if not isinstance(s, (bytes, bytearray)):
            raise NekoError("Invalid argument")
        p, n = _check_range(len(s), pos, length)
        data = memoryview(s)[p:p + n]
        written = 0
        while written < n:
            try:
                d = f.write(data[written:])
            except (OSError, ValueError):
                raise FileError("file_write", self._name) from None
            if not d:
                raise FileError("file_write", self._name)
            written += d
        return n

    def read(self, buf: bytearray, pos: int, length: int) -> int:
        """Read up to length bytes into buf at pos; return the count, raising at end of file."""
        f = self._file()
        if not isinstance(buf, bytearray):
            raise NekoError("Invalid argument")
        p, n = _check_range(len(buf), pos, length)
        view = memoryview(buf)[p:p + n]
        got = 0
        while got < n:
            try:
                d = f.readinto(view[got:])
            except (OSError, ValueError):
                d = 0
            if not d:
                self._eof = True
                if got == 0:
                    raise FileError("file_read", self._name)
                return got
            got += d
        return n

    def write_char(self, c: int) -> None:
        """Write one byte; c must be in 0..255."""
        c = _check_int(c)
        f = self._file()
        if not 0 <= c <= 255:
            raise NekoError("Invalid char")
        try:
            d = f.write(bytes((c,)))
        except (OSError, ValueError):
            raise FileError("file_write_char", self._name) from None
        if d != 1:
            raise FileError("file_write_char", self._name)

    def read_char(self) -> int:
        """Read one byte."""
        f = self._file()
        try:
            data = f.read(1)
        except (OSError, ValueError):
            raise FileError("file_read_char", self._name) from None
        if not data:
            self._eof = True
            raise FileError("file_read_char", self._name)
        return data[0]

    def seek(self, pos: int, whence: int) -> None:
        """Move the file position (whence: 0 start, 1 current, 2 end)."""
        f = self._file()
        p, w = _check_int(pos), _check_int(whence)
        try:
            f.seek(p, w)
        except (OSError, ValueError):
            raise FileError("file_seek", self._name) from None
        self._eof = False

    def tell(self) -> int:
        """Return the current position."""
        f = self._file()
        try:
            return f.tell()
        except (OSError, ValueError):
            raise FileError("file_tell", self._name) from None

    def eof(self) -> bool:
        """Tell whether a read has reached the end of the file."""
        self._file()
        return self._eof

    def flush(self) -> bool:
        """Flush buffered writes."""
        f = self._file()
        try:
            f.flush()
        except (OSError, ValueError):
            raise FileError("file_flush", self._name) from None
        return True


def file_open(name: str, mode: str) -> NekoFile:
    """Open a file with fopen-style access rights; files are always binary."""
    if not isinstance(name, str) or not isinstance(mode, str):
        raise NekoError("Invalid argument")
    py_mode = mode.replace("t", "")
    if "b" not in py_mode:
        py_mode += "b"
    try:
        io = open(name, py_mode)
    except (OSError, ValueError):
        raise FileError("file_open", name) from None
    return NekoFile(name, io)


def file_contents(name: str) -> bytes:
    """Return the whole content of a file."""
    if not isinstance(name, str):
        raise NekoError("Invalid argument")
    try:
        with open(name, "rb") as f:
            return f.read()
    except OSError:
        raise FileError("file_contents", name) from None


def _stdio(name: str, stream: Any) -> NekoFile:
    return NekoFile(name, getattr(stream, "buffer", stream))


def file_stdin() -> NekoFile:
    """The standard input."""
    return _stdio("stdin", sys.stdin)


def file_stdout() -> NekoFile:
    """The standard output."""
    return _stdio("stdout", sys.stdout)


def file_stderr() -> NekoFile:
    """The standard error output."""
    return _stdio("stderr", sys.stderr)
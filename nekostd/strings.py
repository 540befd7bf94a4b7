"""String splitting, formatting, URL escaping and power-of-two base encodings."""

from __future__ import annotations

import re
from typing import Any, Callable

from .values import NekoError

_UNRESERVED = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-."
)
_HEX_UPPER = b"0123456789ABCDEF"
_MASK32 = 0xFFFFFFFF

_SPEC_TEXT = re.compile(r"%([0-9]*)(?:\.([0-9]*))?([\s\S]?)")
_SPEC_BYTES = re.compile(rb"%([0-9]*)(?:\.([0-9]*))?([\s\S]?)")


def _to_bytes(s: Any) -> bytes:
    if isinstance(s, str):
        return s.encode("utf-8", "surrogateescape")
    if isinstance(s, (bytes, bytearray)):
        return bytes(s)
    raise NekoError("Invalid argument")


def _as_text(data: bytes) -> str:
    return data.decode("utf-8", "surrogateescape")


def _alphabet(base: Any) -> bytes:
    if isinstance(base, str):
        try:
            return base.encode("latin-1")
        except UnicodeEncodeError:
            raise NekoError("Invalid base") from None
    if isinstance(base, (bytes, bytearray)):
        return bytes(base)
    raise NekoError("Invalid argument")


def _base_bits(chars: bytes) -> int:
    n = len(chars)
    nbits = 1
    while n > 1 << nbits:
        nbits += 1
    if nbits > 8 or n != 1 << nbits:
        raise NekoError("Invalid base")
    return nbits


def string_split(s: str | bytes, sep: str | bytes) -> list:
    """Split s on sep; an empty separator splits into single characters."""
    if isinstance(s, str) and isinstance(sep, str):
        pass
    elif isinstance(s, (bytes, bytearray)) and isinstance(sep, (bytes, bytearray)):
        s, sep = bytes(s), bytes(sep)
    else:
        raise NekoError("Invalid argument")
    if not s:
        return []
    if not sep:
        return [s[i:i + 1] for i in range(len(s))]
    return s.split(sep)


class _Params:
    def __init__(self, params: Any) -> None:
        self._params = params
        self._count = 0

    def next(self) -> Any:
        is_array = isinstance(self._params, list)
        if self._count == 0 and not is_array:
            self._count = 1
            return self._params
        if not is_array or len(self._params) <= self._count:
            raise NekoError("Not enough parameters")
        value = self._params[self._count]
        self._count += 1
        return value


def _check_int(v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise NekoError("Invalid argument")
    return v


def _format_int(n: int, width: int, prec: int, conv: str) -> str:
    sign = False
    if conv == "d":
        if n < 0:
            sign = True
            prec -= 1
            n = -n
        digits = str(n)
    else:
        digits = format(n & _MASK32, conv)
    size = len(digits)
    tsize = size if size > prec else prec + sign
    return (
        " " * max(0, width - tsize)
        + ("-" if sign else "")
        + "0" * max(0, prec - size)
        + digits
    )


def _format_one(conv: str, width: int, prec: int, param: Any, binary: bool) -> str | bytes:
    encode: Callable[[str], str | bytes] = (
        (lambda t: t.encode("latin-1")) if binary else (lambda t: t)
    )
    if conv == "c":
        c = _check_int(param)
        if not 0 <= c <= 255:
            raise NekoError("Invalid char")
        return bytes((c,)) if binary else chr(c)
    if conv in ("d", "x", "X"):
        return encode(_format_int(_check_int(param), width, prec, conv))
    if conv == "f":
        if not isinstance(param, float):
            raise NekoError("Invalid argument")
        return encode("%.15g" % param)
    if conv == "s":
        if isinstance(param, str):
            text = param.encode("utf-8", "surrogateescape") if binary else param
        elif isinstance(param, (bytes, bytearray)):
            text = bytes(param) if binary else _as_text(bytes(param))
        else:
            raise NekoError("Invalid argument")
        size = len(text)
        tsize = max(size, prec)
        padding = max(0, width - tsize) + max(0, prec - size)
        return encode(" " * padding) + text
    if conv == "b":
        if not isinstance(param, bool):
            raise NekoError("Invalid argument")
        return encode("true" if param else "false")
    raise NekoError("Invalid format")


def sprintf(fmt: str | bytes, params: Any) -> str | bytes:
    """Format a string with %s %d %x %X %c %b %f, width and precision.

    A single parameter may be passed directly; several go in a list.
    """
    if isinstance(fmt, str):
        binary = False
        pattern = _SPEC_TEXT
    elif isinstance(fmt, (bytes, bytearray)):
        fmt = bytes(fmt)
        binary = True
        pattern = _SPEC_BYTES
    else:
        raise NekoError("Invalid argument")
    percent = b"%" if binary else "%"
    fetch = _Params(params)
    out: list = []
    pos = 0
    while (m := pattern.search(fmt, pos)) is not None:
        out.append(fmt[pos:m.start()])
        width = int(m.group(1) or 0)
        prec = int(m.group(2) or 0)
        conv = m.group(3)
        if binary:
            conv = conv.decode("latin-1")
        if conv == "%":
            out.append(percent)
            # The character right after "%%" is consumed as well.
            pos = m.end() + 1
            continue
        param = fetch.next()
        out.append(_format_one(conv, width, prec, param, binary))
        pos = m.end()
    out.append(fmt[pos:])
    return fmt[:0].join(out)


def _hex_value(c: int) -> int | None:
    if 0x30 <= c <= 0x39:
        return c - 0x30
    if 0x61 <= c <= 0x66:
        return c - 0x61 + 10
    if 0x41 <= c <= 0x46:
        return c - 0x41 + 10
    return None


def url_decode(s: str | bytes) -> str | bytes:
    """Decode %XX escapes and '+' as space; malformed escapes are dropped."""
    data = _to_bytes(s)
    out = bytearray()
    i, n = 0, len(data)
    while i < n:
        c = data[i]
        i += 1
        if c == 0x2B:
            c = 0x20
        elif c == 0x25:
            if n - i < 2:
                break
            h1, h2 = _hex_value(data[i]), _hex_value(data[i + 1])
            i += 2
            if h1 is None or h2 is None:
                continue
            c = (h1 << 4) + h2
        out.append(c)
    return _as_text(bytes(out)) if isinstance(s, str) else bytes(out)


def url_encode(s: str | bytes) -> str | bytes:
    """Escape every byte except letters, digits, '_', '-' and '.' as %XX."""
    data = _to_bytes(s)
    out = bytearray()
    for c in data:
        if c in _UNRESERVED:
            out.append(c)
        else:
            out += bytes((0x25, _HEX_UPPER[c >> 4], _HEX_UPPER[c & 0xF]))
    return out.decode("ascii") if isinstance(s, str) else bytes(out)


def base_encode(s: str | bytes, base: str | bytes) -> str | bytes:
    """Encode s with an alphabet whose length is a power of two (2..256)."""
    data = _to_bytes(s)
    chars = _alphabet(base)
    nbits = _base_bits(chars)
    size = (len(data) * 8 + nbits - 1) // nbits
    mask = (1 << nbits) - 1
    source = iter(data)
    buf = 0
    curbits = 0
    out = bytearray()
    for _ in range(size):
        while curbits < nbits:
            curbits += 8
            buf = ((buf << 8) | next(source, 0)) & _MASK32
        curbits -= nbits
        out.append(chars[(buf >> curbits) & mask])
    return out.decode("latin-1") if isinstance(s, str) else bytes(out)


def base_decode(s: str | bytes, base: str | bytes) -> str | bytes:
    """Decode a string encoded by base_encode with the same alphabet."""
    data = _to_bytes(s)
    chars = _alphabet(base)
    nbits = _base_bits(chars)
    table = {c: i for i, c in enumerate(chars)}
    size = (len(data) * nbits) // 8
    source = iter(data)
    buf = 0
    curbits = 0
    out = bytearray()
    for _ in range(size):
        while curbits < 8:
            curbits += nbits
            index = table.get(next(source))
            if index is None:
                raise NekoError("Invalid character")
            buf = ((buf << nbits) | index) & _MASK32
        curbits -= 8
        out.append((buf >> curbits) & 0xFF)
    return _as_text(bytes(out)) if isinstance(s, str) else bytes(out)
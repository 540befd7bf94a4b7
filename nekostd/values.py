"""Runtime value model: errors, 32-bit integers, objects, hashes and field ids."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterator

INT32_MIN = -(1 << 31)
_MASK32 = 0xFFFFFFFF
_FIELD_MASK = 0x7FFFFFFF


class NekoError(Exception):
    """Raised wherever the runtime throws a value."""

    def __init__(self, value: Any = "Neko error") -> None:
        super().__init__(value)
        self.value = value


def wrap_int32(n: int) -> int:
    """Wrap an integer to the signed 32-bit range."""
    n &= _MASK32
    return n - (1 << 32) if n & 0x80000000 else n


def truncate_to_int32(x: float) -> int:
    """Convert a float to a 32-bit int by truncation; out-of-range gives INT32_MIN."""
    if not math.isfinite(x):
        return INT32_MIN
    n = int(x)
    if not INT32_MIN <= n < (1 << 31):
        return INT32_MIN
    return n


@dataclass(frozen=True)
class Int32:
    """A boxed signed 32-bit integer."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("Int32 needs an int")
        object.__setattr__(self, "value", wrap_int32(self.value))

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value


def need_32_bits(n: int) -> bool:
    """Tell whether an integer does not fit in 31 bits."""
    return not -(1 << 30) <= n < (1 << 30)


def best_int(n: int) -> int | Int32:
    """Wrap to 32 bits and return a plain int if it fits in 31 bits, else an Int32."""
    w = wrap_int32(n)
    return Int32(w) if need_32_bits(w) else w


def any_int(v: Any) -> int:
    """Return the integer held by an int or an Int32; raise NekoError otherwise."""
    if isinstance(v, Int32):
        return v.value
    if isinstance(v, int) and not isinstance(v, bool):
        return wrap_int32(v)
    raise NekoError("Invalid argument")


_field_names: dict[int, str] = {}


def field_id(name: str) -> int:
    """Hash a field name to its id and remember the name."""
    acc = 0
    for byte in name.encode("utf-8"):
        acc = (223 * acc + byte) & _MASK32
    fid = acc & _FIELD_MASK
    known = _field_names.setdefault(fid, name)
    if known != name:
        raise NekoError(f"Field conflict between {known} and {name}")
    return fid


def field_name(fid: int) -> str | None:
    """Return the name registered for a field id, if any."""
    return _field_names.get(fid)


ID_H = field_id("h")
ID_M = field_id("m")
ID_S = field_id("s")
ID_Y = field_id("y")
ID_D = field_id("d")
ID_LOADMODULE = field_id("loadmodule")
ID_LOADPRIM = field_id("loadprim")
ID_MODULE = field_id("__module")
ID_DONE = field_id("done")
ID_COMMENT = field_id("comment")
ID_XML = field_id("xml")
ID_PCDATA = field_id("pcdata")
ID_CDATA = field_id("cdata")
ID_DOCTYPE = field_id("doctype")
ID_SERIALIZE = field_id("__serialize")
ID_UNSERIALIZE = field_id("__unserialize")


def _key(name_or_id: str | int) -> int:
    if isinstance(name_or_id, str):
        return field_id(name_or_id)
    if isinstance(name_or_id, int) and not isinstance(name_or_id, bool):
        return name_or_id
    raise TypeError("field must be a name or an id")


class NekoObject:
    """An object: a table of fields keyed by id, with an optional prototype."""

    __slots__ = ("_fields", "proto")

    def __init__(self, fields: dict | None = None, proto: NekoObject | None = None) -> None:
        self._fields: dict[int, Any] = {}
        self.proto = proto
        for k, v in (fields or {}).items():
            self.set(k, v)

    def get(self, field: str | int) -> Any:
        """Return the field value, or None when it is absent."""
        return self._fields.get(_key(field))

    def set(self, field: str | int, value: Any) -> None:
        """Set a field value."""
        self._fields[_key(field)] = value

    def items(self) -> Iterator[tuple[int, Any]]:
        """Yield (field id, value) pairs in id order."""
        yield from sorted(self._fields.items(), key=lambda kv: kv[0])

    def __contains__(self, field: object) -> bool:
        return isinstance(field, (str, int)) and _key(field) in self._fields

    def __len__(self) -> int:
        return len(self._fields)


class NekoHash:
    """A hash table laid out as a fixed number of cells of (hkey, key, value)."""

    def __init__(self, ncells: int) -> None:
        if ncells < 0:
            raise NekoError("Invalid hash size")
        self._cells: list[list[tuple[int, Any, Any]]] = [[] for _ in range(ncells)]

    @property
    def ncells(self) -> int:
        return len(self._cells)

    @property
    def nitems(self) -> int:
        return sum(len(cell) for cell in self._cells)

    def add(self, hkey: int, key: Any, value: Any) -> None:
        """Append an entry to the cell selected by its hash key."""
        if not self._cells:
            raise NekoError("Hash has no cells")
        self._cells[hkey % len(self._cells)].append((hkey, key, value))

    def entries(self) -> Iterator[tuple[int, Any, Any]]:
        """Yield (hkey, key, value) in cell order."""
        for cell in self._cells:
            yield from cell

    def __len__(self) -> int:
        return self.nitems
"""Binary serialization of runtime values, with shared and cyclic references."""

from __future__ import annotations

import struct
from typing import Any, Callable

from .values import (
    ID_SERIALIZE,
    ID_UNSERIALIZE,
    ID_MODULE,
    Int32,
    NekoError,
    NekoHash,
    NekoObject,
    need_32_bits,
    wrap_int32,
)

_MAX_DEPTH = 350
_MAX_SIZE = (1 << 29) - 1
_VAR_ARGS = -1
_CO_VARARGS = 0x04
_INT = struct.Struct("<i")
_FLOAT = struct.Struct("<d")


def _invalid() -> NekoError:
    return NekoError("Invalid serialized data")


def _arity(f: Callable[..., Any]) -> int:
    """Number of required positional parameters, or -1 for variadic or unknown callables."""
    target: Any = f
    bound = 0
    if getattr(target, "__code__", None) is None:
        if getattr(target, "__func__", None) is None:
            target = getattr(type(f), "__call__", None)
        else:
            target = target.__func__
        bound = 1
    code = getattr(target, "__code__", None)
    if code is None:
        return _VAR_ARGS
    if code.co_flags & _CO_VARARGS:
        return _VAR_ARGS
    defaults = getattr(target, "__defaults__", None) or ()
    return max(code.co_argcount - len(defaults) - bound, 0)


def _display(name: Any) -> str:
    if isinstance(name, (bytes, bytearray)):
        return bytes(name).decode("utf-8", errors="replace")
    return str(name)


class _Writer:
    def __init__(self) -> None:
        self.out = bytearray()
        self._refs: dict[int, tuple[int, Any]] = {}
        self._depth = 0

    def _int(self, n: int) -> None:
        self.out += _INT.pack(wrap_int32(n))

    def _ref(self, o: Any) -> bool:
        entry = self._refs.get(id(o))
        if entry is None:
            return False
        self.out += b"r"
        self._int(len(self._refs) - 1 - entry[0])
        return True

    def _register(self, o: Any) -> None:
        # The object is kept in the table so that its id cannot be reused.
        self._refs[id(o)] = (len(self._refs), o)

    def write(self, v: Any) -> None:
        self._depth += 1
        if self._depth > _MAX_DEPTH:
            raise NekoError("Serialization stack overflow")
        out = self.out
        if v is None:
            out += b"N"
        elif isinstance(v, bool):
            out += b"T" if v else b"F"
        elif isinstance(v, Int32):
            out += b"I"
            self._int(v.value)
        elif isinstance(v, int):
            if need_32_bits(v):
                out += b"I"
            else:
                out += b"i"
            self._int(v)
        elif isinstance(v, float):
            out += b"f"
            out += _FLOAT.pack(v)
        elif isinstance(v, (str, bytes, bytearray)):
            if not self._ref(v):
                self._register(v)
                data = v.encode("utf-8") if isinstance(v, str) else bytes(v)
                out += b"s"
                self._int(len(data))
                out += data
        elif isinstance(v, NekoObject):
            if not self._ref(v):
                if ID_SERIALIZE in v:
                    method = v.get(ID_SERIALIZE)
                    if not callable(method) or _arity(method) not in (0, _VAR_ARGS):
                        raise NekoError("Invalid __serialize method")
                    out += b"x"
                    self.write(getattr(method, "__module__", None) or "")
                    self.write(method())
                    self._register(v)
                else:
                    self._register(v)
                    out += b"o"
                    for fid, fval in v.items():
                        self._int(fid)
                        self.write(fval)
                    self._int(0)
                    if v.proto is None:
                        out += b"z"
                    else:
                        out += b"p"
                        self.write(v.proto)
        elif isinstance(v, (list, tuple)):
            if not self._ref(v):
                self._register(v)
                out += b"a"
                self._int(len(v))
                for item in v:
                    self.write(item)
        elif isinstance(v, NekoHash):
            out += b"h"
            self._int(v.ncells)
            self._int(v.nitems)
            for hkey, key, val in v.entries():
                self._int(hkey)
                self.write(key)
                self.write(val)
        elif callable(v):
            raise NekoError("Cannot Serialize function")
        else:
            raise NekoError("Cannot Serialize Abstract")
        self._depth -= 1


def _ocall(obj: Any, name: str, *args: Any) -> Any:
    if isinstance(obj, NekoObject):
        f = obj.get(name)
    else:
        f = getattr(obj, name, None)
    if not callable(f):
        raise NekoError(f"Invalid call to {name}")
    return f(*args)


class _Reader:
    def __init__(self, data: bytes, loader: Any) -> None:
        self.data = data
        self.pos = 0
        self.loader = loader
        self.refs: list[Any] = []
        self._handlers: dict[int, Callable[[], Any]] = {
            ord("N"): lambda: None,
            ord("T"): lambda: True,
            ord("F"): lambda: False,
            ord("i"): self._int,
            ord("I"): lambda: Int32(self._int()),
            ord("f"): lambda: _FLOAT.unpack(self._take(8))[0],
            ord("s"): self._string,
            ord("o"): self._object,
            ord("r"): self._reference,
            ord("a"): self._array,
            ord("p"): self._primitive,
            ord("L"): self._bytecode_function,
            ord("x"): self._custom,
            ord("h"): self._hash,
        }

    def _char(self) -> int:
        if self.pos >= len(self.data):
            return -1
        c = self.data[self.pos]
        self.pos += 1
        return c

    def _take(self, n: int) -> bytes:
        if self.pos + n > len(self.data):
            raise _invalid()
        chunk = self.data[self.pos:self.pos + n]
        self.pos += n
        return chunk

    def _int(self) -> int:
        return _INT.unpack(self._take(4))[0]

    def read(self) -> Any:
        handler = self._handlers.get(self._char())
        if handler is None:
            raise _invalid()
        return handler()

    def _string(self) -> bytes:
        n = self._int()
        if n < 0 or n > _MAX_SIZE:
            raise _invalid()
        s = self._take(n)
        self.refs.append(s)
        return s

    def _object(self) -> NekoObject:
        o = NekoObject()
        self.refs.append(o)
        while (fid := self._int()) != 0:
            o.set(fid, self.read())
        tag = self._char()
        if tag == ord("p"):
            proto = self.read()
            if not isinstance(proto, NekoObject):
                raise _invalid()
            o.proto = proto
        elif tag != ord("z"):
            raise _invalid()
        return o

    def _reference(self) -> Any:
        n = self._int()
        if n < 0 or n >= len(self.refs):
            raise _invalid()
        return self.refs[len(self.refs) - n - 1]

    def _array(self) -> list:
        n = self._int()
        if n < 0 or n > _MAX_SIZE:
            raise _invalid()
        items: list[Any] = []
        self.refs.append(items)
        for _ in range(n):
            items.append(self.read())
        return items

    def _primitive(self) -> Any:
        nargs = self._int()
        slot = len(self.refs)
        self.refs.append(None)
        name = self.read()
        f = _ocall(self.loader, "loadprim", name, nargs)
        if not callable(f) or _arity(f) != nargs:
            raise NekoError("Loader returned not-a-function")
        self.refs[slot] = f
        return f

    def _bytecode_function(self) -> Any:
        self.refs.append(None)
        mname = self.read()
        self._int()
        self._int()
        env = self.read()
        if not isinstance(env, list):
            raise _invalid()
        exports = _ocall(self.loader, "loadmodule", mname, self.loader)
        if not isinstance(exports, NekoObject):
            raise NekoError(f"module {_display(mname)} is not an object")
        exports.get(ID_MODULE)
        # No bytecode module representation exists here to rebuild the closure from.
        raise NekoError(f"module {_display(mname)} has invalid type")

    def _custom(self) -> Any:
        mname = self.read()
        data = self.read()
        exports = _ocall(self.loader, "loadmodule", mname, self.loader)
        if not isinstance(exports, NekoObject):
            raise NekoError(f"module {_display(mname)} is not an object")
        restore = exports.get(ID_UNSERIALIZE)
        if not callable(restore) or _arity(restore) not in (1, _VAR_ARGS):
            raise NekoError(f"module {_display(mname)} has invalid __unserialize function")
        result = restore(data)
        self.refs.append(result)
        return result

    def _hash(self) -> NekoHash:
        ncells = self._int()
        nitems = self._int()
        if ncells < 0 or nitems < 0 or (nitems and ncells == 0):
            raise _invalid()
        h = NekoHash(ncells)
        for _ in range(nitems):
            hkey = self._int()
            key = self.read()
            val = self.read()
            h.add(hkey, key, val)
        return h


def serialize(value: Any) -> bytes:
    """Serialize a value recursively; strings, arrays and objects are shared by identity."""
    writer = _Writer()
    try:
        writer.write(value)
    except RecursionError:
        raise NekoError("Serialization stack overflow") from None
    return bytes(writer.out)


def unserialize(data: bytes | bytearray | str, loader: Any) -> Any:
    """Rebuild a serialized value; strings come back as bytes.

    The loader provides loadprim(name, nargs) and loadmodule(name, loader),
    either as methods or as callable fields of a NekoObject.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not isinstance(data, (bytes, bytearray)):
        raise NekoError("Invalid argument")
    try:
        return _Reader(bytes(data), loader).read()
    except RecursionError:
        raise _invalid() from None
# nekostd

A self-contained library of runtime primitives with exact, fixed behaviour:
wrapping 32-bit integers, math helpers, a reproducible random generator,
digests, a binary value serializer, file and string utilities, and child
processes. It has no dependencies outside the standard library.

## Modules

- `nekostd.values`: the value model shared by the other modules. It holds
  `NekoError` (the exception every module raises), `Int32` (a boxed signed
  32-bit integer), `NekoObject` (fields keyed by name or id, with an optional
  `proto`), `NekoHash`, and the helpers `need_32_bits`, `best_int` and `any_int`.
- `nekostd.int32`: wrapping 32-bit arithmetic, including `int32_new`,
  `int32_to_int`, `int32_to_float`, `int32_compare`, `int32_add`, `int32_sub`,
  `int32_mul`, `int32_div`, `int32_mod`, `int32_shl`, `int32_shr`, `int32_ushr`,
  `int32_neg`, `int32_complement`, `int32_or`, `int32_and` and `int32_xor`.
  A result that fits in 31 bits comes back as a plain `int`. A larger one
  comes back as an `Int32`. Division or modulo by zero raises `NekoError`.
- `nekostd.numeric`: the functions `math_pi`, `math_atan2`, `math_pow`,
  `math_abs`, `math_ceil`, `math_floor`, `math_round`, `math_fceil`,
  `math_ffloor`, `math_fround`, `math_int`, `math_sqrt`, `math_atan`,
  `math_cos`, `math_sin`, `math_tan`, `math_log`, `math_exp`, `math_acos` and
  `math_asin`. The integer-rounding functions return integers. `math_pow`
  returns an integer when its result is integral and fits in 32 bits.
- `nekostd.prng`: `Random`, a seeded generator. Its methods are `set_seed`,
  `next_uint`, `rand_int` and `rand_float`. Without a seed it mixes the clock
  and the process id.
- `nekostd.digest`:
  - `Md5` and `md5` compute standard MD5.
  - `make_md5` digests any value (numbers, strings, lists, `NekoObject`s,
    callables) and handles cycles.
  - `make_sha1(s, pos, length)` computes SHA-1 over a slice.
- `nekostd.misc`:
  - `float_bytes`, `double_bytes`, `float_of_bytes` and `double_of_bytes`
    convert IEEE values in a chosen byte order.
  - `merge_sort(arr, length, cmp)` is a stable in-place sort driven by a
    comparison function.
- `nekostd.serialize`: `serialize` and `unserialize(data, loader)`.
  - The format covers `None`, booleans, ints, `Int32`, floats, strings,
    lists, `NekoObject` and `NekoHash`.
  - Shared and cyclic strings, lists and objects are kept as references.
  - An object with a `__serialize` field is written through that method. It
    is read back through the loader's `loadmodule` and the module's
    `__unserialize`.
  - Strings come back as `bytes`.
- `nekostd.files`:
  - `file_open` and `file_contents`.
  - `file_stdin`, `file_stdout` and `file_stderr`.
  - `NekoFile`, with `write`, `read`, `write_char`, `read_char`, `seek`,
    `tell`, `eof`, `flush` and `close`. It can be used as a context manager.
  - Failures raise `FileError`, whose value is `[operation, file name]`.
- `nekostd.strings`:
  - `string_split`.
  - `sprintf`, which supports `%s %d %x %X %c %b %f` with width and precision.
  - `url_encode` and `url_decode`.
  - `base_encode` and `base_decode`, for any alphabet whose length is a power
    of two between 2 and 256.
- `nekostd.process`:
  - `process_run(cmd, args)` runs `cmd` with `args`. If `args` is `None`, it
    passes `cmd` to the system shell.
  - It returns a `Process`, with `stdout_read`, `stderr_read`, `stdin_write`,
    `stdin_close`, `exit`, `kill`, `close` and `pid`.

## Installation

```
pip install .
```

## Examples

```python
from nekostd.int32 import int32_add
from nekostd.prng import Random
from nekostd.digest import md5
from nekostd.strings import sprintf, base_encode
from nekostd.serialize import serialize, unserialize

int32_add(0x7FFFFFFF, 1)          # Int32(value=-2147483648)

rng = Random()
rng.set_seed(42)
rng.rand_int(100)                 # same value for the same seed

md5(b"").hex()                    # 'd41d8cd98f00b204e9800998ecf8427e'

sprintf(b"%5d|%s", [42, b"x"])    # b'   42|x'
base_encode(b"\xff", b"0123456789abcdef")  # b'ff'

unserialize(serialize([1, "a"]), None)     # [1, b'a']
```

Running a child process:

```python
from nekostd.process import process_run

with process_run("echo", ["hello"]) as p:
    buf = bytearray(64)
    n = p.stdout_read(buf, 0, len(buf))
    print(bytes(buf[:n]))         # b'hello\n'
    print(p.exit())               # 0
```

## What this package does not do

- It has no operating-system helpers beyond files and child processes. It
  does not cover environment variables, working directories, stat, directory
  listings, clocks or sleeping.
- It has no threads, locks, mutexes, thread-local storage or message queues.
- It has no sockets and no command-line program.
- `serialize` refuses plain callables. `unserialize` cannot rebuild
  bytecode-module functions: such data raises `NekoError`.

## Running the tests

```
pip install .[test]
pytest
```
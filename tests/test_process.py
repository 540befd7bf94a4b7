import sys

import pytest

from nekostd.process import process_run
from nekostd.values import NekoError

PY = sys.executable


def _drain(read):
    collected = bytearray()
    buf = bytearray(64)
    while True:
        try:
            n = read(buf, 0, len(buf))
        except NekoError:
            return bytes(collected)
        collected += buf[:n]


def test_echo_through_stdin_and_stdout():
    data = b"hello world"
    with process_run(PY, ["-c", "import sys; sys.stdout.write(sys.stdin.read())"]) as p:
        assert p.stdin_write(data, 0, len(data)) == len(data)
        p.stdin_close()
        assert _drain(p.stdout_read) == data
        assert p.exit() == 0


def test_stdin_write_slice():
    data = b"xxpayloadyy"
    with process_run(PY, ["-c", "import sys; sys.stdout.write(sys.stdin.read())"]) as p:
        p.stdin_write(data, 2, 7)
        p.stdin_close()
        assert _drain(p.stdout_read) == data[2:9]
        p.exit()


def test_stderr_read():
    with process_run(PY, ["-c", "import sys; sys.stderr.write('oops')"]) as p:
        assert _drain(p.stderr_read) == b"oops"
        assert p.exit() == 0


def test_read_at_offset_keeps_prefix():
    with process_run(PY, ["-c", "import sys; sys.stdout.write('ab')"]) as p:
        p.exit()
        buf = bytearray(b"--------")
        n = p.stdout_read(buf, 2, 6)
        assert buf[:2] == b"--"
        assert bytes(buf[2:2 + n]) == b"ab"[:n]


def test_exit_code():
    with process_run(PY, ["-c", "import sys; sys.exit(3)"]) as p:
        assert p.exit() == 3


def test_shell_mode():
    with process_run("exit 4", None) as p:
        assert p.exit() == 4


def test_pid_matches_child():
    with process_run(PY, ["-c", "import os; print(os.getpid())"]) as p:
        out = _drain(p.stdout_read)
        assert int(out) == p.pid
        p.exit()


def test_kill_reports_signal():
    with process_run(PY, ["-c", "import time; time.sleep(30)"]) as p:
        p.kill()
        with pytest.raises(NekoError, match="signal 9"):
            p.exit()


def test_invalid_ranges():
    with process_run(PY, ["-c", "pass"]) as p:
        with pytest.raises(NekoError):
            p.stdout_read(bytearray(4), 2, 3)
        with pytest.raises(NekoError):
            p.stdin_write(b"abc", -1, 1)
        with pytest.raises(NekoError):
            p.stderr_read(bytearray(4), 0, -1)
        p.exit()


def test_stdin_close_twice():
    with process_run(PY, ["-c", "pass"]) as p:
        p.stdin_close()
        with pytest.raises(NekoError):
            p.stdin_close()
        with pytest.raises(NekoError):
            p.stdin_write(b"a", 0, 1)
        p.exit()


def test_operations_after_close_fail():
    p = process_run(PY, ["-c", "pass"])
    p.exit()
    p.close()
    with pytest.raises(NekoError):
        p.pid
    with pytest.raises(NekoError):
        p.stdout_read(bytearray(4), 0, 4)
    with pytest.raises(NekoError):
        p.close()


def test_end_of_output_raises():
    with process_run(PY, ["-c", "pass"]) as p:
        p.exit()
        with pytest.raises(NekoError):
            p.stdout_read(bytearray(8), 0, 8)


def test_missing_command():
    with pytest.raises(NekoError, match="Command not found"):
        process_run("/nonexistent/program-that-does-not-exist", [])


def test_non_string_args_rejected():
    with pytest.raises(NekoError):
        process_run(PY, ["-c", 1])
    with pytest.raises(NekoError):
        process_run(PY, "-c")
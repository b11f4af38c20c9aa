"""The small user programs: cat, echo, grep, wc, ls, mkdir, rm, ln, kill and pause."""

import os
import signal
import stat
import sys
import time
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .kpmatch import grep_lines
from .layout import HZ
from .shell import DIRSIZ
from .ulib import atoi

# File types as reported by stat.
T_DIR = 1
T_FILE = 2
T_DEV = 3

READ_SIZE = 512
GREP_READ_SIZE = 1024
LS_BUFSIZE = 512

_WORD_SEPARATORS = b" \r\t\n\v"
_SIGKILL = getattr(signal, "SIGKILL", signal.SIGTERM)


def _to_bytes(data: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8", "surrogateescape")
    return bytes(data)


def _emit(stream, data: Union[str, bytes]) -> None:
    raw = _to_bytes(data)
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        stream.write(raw.decode("utf-8", "surrogateescape"))
        return
    stream.flush()
    buffer.write(raw)
    buffer.flush()


def _out(data: Union[str, bytes]) -> None:
    _emit(sys.stdout, data)


def _err(data: Union[str, bytes]) -> None:
    _emit(sys.stderr, data)


def _stdin():
    return getattr(sys.stdin, "buffer", sys.stdin)


def _read_chunks(stream, size: int) -> Iterator[bytes]:
    while True:
        chunk = stream.read(size)
        if not chunk:
            return
        yield _to_bytes(chunk)


def _args(argv: Optional[Sequence[str]]) -> List[str]:
    return list(sys.argv[1:] if argv is None else argv)


def _count_chunks(chunks: Iterable[bytes]) -> Tuple[int, int, int]:
    lines = words = chars = 0
    inword = False
    for chunk in chunks:
        chars += len(chunk)
        for byte in chunk:
            if byte == 0x0A:
                lines += 1
            if byte in _WORD_SEPARATORS:
                inword = False
            elif not inword:
                words += 1
                inword = True
    return lines, words, chars


def word_count(data: Union[str, bytes, bytearray]) -> Tuple[int, int, int]:
    """Count (lines, words, characters) the way wc does."""
    return _count_chunks([_to_bytes(data)])


def fmtname(path: str) -> str:
    """Last path component, blank-padded to the directory name width."""
    name = path[path.rfind("/") + 1:]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _cat(stream) -> int:
    try:
        for chunk in _read_chunks(stream, READ_SIZE):
            _out(chunk)
    except OSError:
        _out("cat: read error\n")
        return 1
    return 0


def cat_main(argv: Optional[Sequence[str]] = None) -> int:
    """Copy the named files, or standard input, to standard output."""
    args = _args(argv)
    if not args:
        return _cat(_stdin())
    for name in args:
        try:
            handle = open(name, "rb")
        except OSError:
            _out(f"cat: cannot open {name}\n")
            return 1
        with handle:
            status = _cat(handle)
        if status:
            return status
    return 0


def echo_main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the arguments separated by spaces."""
    args = _args(argv)
    if args:
        _out(" ".join(args) + "\n")
    return 0


def _grep(pattern: str, stream) -> None:
    for line in grep_lines(pattern, _read_chunks(stream, GREP_READ_SIZE)):
        _out(line)


def grep_main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the lines of the files, or standard input, that match a pattern."""
    args = _args(argv)
    if not args:
        _err("usage: grep pattern [file ...]\n")
        return 1
    pattern, files = args[0], args[1:]
    if not files:
        _grep(pattern, _stdin())
        return 0
    for name in files:
        try:
            handle = open(name, "rb")
        except OSError:
            _out(f"grep: cannot open {name}\n")
            return 1
        with handle:
            _grep(pattern, handle)
    return 0


def _wc(stream, name: str) -> int:
    try:
        lines, words, chars = _count_chunks(_read_chunks(stream, READ_SIZE))
    except OSError:
        _out("wc: read error\n")
        return 1
    _out(f"{lines} {words} {chars} {name}\n")
    return 0


def wc_main(argv: Optional[Sequence[str]] = None) -> int:
    """Count lines, words and characters of the files or standard input."""
    args = _args(argv)
    if not args:
        return _wc(_stdin(), "")
    for name in args:
        try:
            handle = open(name, "rb")
        except OSError:
            _out(f"wc: cannot open {name}\n")
            return 1
        with handle:
            status = _wc(handle, name)
        if status:
            return status
    return 0


def _file_type(mode: int) -> int:
    if stat.S_ISDIR(mode):
        return T_DIR
    if stat.S_ISREG(mode):
        return T_FILE
    return T_DEV


def _ls(path: str) -> int:
    try:
        info = os.stat(path)
    except OSError:
        _err(f"ls: cannot open {path}\n")
        return 1

    kind = _file_type(info.st_mode)
    if kind == T_FILE:
        _out(f"{fmtname(path)} {kind} {info.st_ino} {info.st_size}\n")
        return 0
    if kind != T_DIR:
        return 0

    if len(os.fsencode(path)) + 1 + DIRSIZ + 1 > LS_BUFSIZE:
        _out("ls: path too long\n")
        return 1
    try:
        names = sorted(os.listdir(path))
    except OSError:
        _err(f"ls: cannot open {path}\n")
        return 1
    for name in [".", ".."] + names:
        full = f"{path}/{name}"
        try:
            entry = os.stat(full)
        except OSError:
            _out(f"ls: cannot stat {full}\n")
            continue
        _out(f"{fmtname(full)} {_file_type(entry.st_mode)} {entry.st_ino} {entry.st_size}\n")
    return 0


def ls_main(argv: Optional[Sequence[str]] = None) -> int:
    """List files and directory contents with type, inode and size."""
    args = _args(argv)
    if not args:
        return _ls(".")
    status = 0
    for path in args:
        status = max(status, _ls(path))
    return status


def mkdir_main(argv: Optional[Sequence[str]] = None) -> int:
    """Create directories, stopping at the first failure."""
    args = _args(argv)
    if not args:
        _err("Usage: mkdir files...\n")
        return 1
    for name in args:
        try:
            os.mkdir(name)
        except OSError:
            _err(f"mkdir: {name} failed to create\n")
            return 1
    return 0


def _unlink(name: str) -> None:
    if os.path.isdir(name) and not os.path.islink(name):
        os.rmdir(name)
    else:
        os.unlink(name)


def rm_main(argv: Optional[Sequence[str]] = None) -> int:
    """Remove files and empty directories, stopping at the first failure."""
    args = _args(argv)
    if not args:
        _err("Usage: rm files...\n")
        return 1
    for name in args:
        try:
            _unlink(name)
        except OSError:
            _err(f"rm: {name} failed to delete\n")
            return 1
    return 0


def ln_main(argv: Optional[Sequence[str]] = None) -> int:
    """Make a hard link ``new`` to ``old``."""
    args = _args(argv)
    if len(args) != 2:
        _err("Usage: ln old new\n")
        return 1
    old, new = args
    try:
        os.link(old, new)
    except OSError:
        _err(f"link {old} {new}: failed\n")
        return 1
    return 0


def kill_main(argv: Optional[Sequence[str]] = None) -> int:
    """Kill each process named by pid; failures are ignored."""
    for arg in _args(argv):
        pid = atoi(arg)
        if pid <= 0:
            # No process has such an id.
            continue
        try:
            os.kill(pid, _SIGKILL)
        except OSError:
            pass
    return 0


def pause_main(argv: Optional[Sequence[str]] = None) -> int:
    """Sleep for the given number of seconds."""
    args = _args(argv)
    if len(args) != 1:
        _err("usage: pause seconds\n")
        return 1
    seconds = atoi(args[0])
    if seconds < 0:
        _err("pause: seconds must be non-negative\n")
        return 1
    ticks = seconds * HZ
    time.sleep(ticks / HZ)
    return 0


COMMANDS: Dict[str, Callable[[Optional[Sequence[str]]], int]] = {
    "cat": cat_main,
    "echo": echo_main,
    "grep": grep_main,
    "wc": wc_main,
    "ls": ls_main,
    "mkdir": mkdir_main,
    "rm": rm_main,
    "ln": ln_main,
    "kill": kill_main,
    "pause": pause_main,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command named by the first argument with the rest."""
    args = _args(argv)
    if not args:
        _err("usage: xvkit command [arg ...]\n")
        return 1
    name, rest = args[0], args[1:]
    command = COMMANDS.get(name)
    if command is None:
        _err(f"exec {name} failed\n")
        return 1
    return command(rest)
"""Tiny regular expressions (^ . * $) and a buffered line filter."""

from typing import Iterable, Iterator, Union

BUFSIZE = 1024

Text = Union[str, bytes, bytearray]


def _as_text(value: Text) -> str:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("latin-1")
    nul = value.find("\0")
    return value if nul < 0 else value[:nul]


def match(pattern: Text, text: Text) -> bool:
    """Search for ``pattern`` anywhere in ``text``."""
    re, s = _as_text(pattern), _as_text(text)
    if re.startswith("^"):
        return _match_here(re, 1, s, 0)
    return any(_match_here(re, 0, s, i) for i in range(len(s) + 1))


def _match_here(re: str, ri: int, s: str, si: int) -> bool:
    if ri == len(re):
        return True
    if ri + 1 < len(re) and re[ri + 1] == "*":
        return _match_star(re[ri], re, ri + 2, s, si)
    if re[ri] == "$" and ri + 1 == len(re):
        return si == len(s)
    if si < len(s) and (re[ri] == "." or re[ri] == s[si]):
        return _match_here(re, ri + 1, s, si + 1)
    return False


def _match_star(c: str, re: str, ri: int, s: str, si: int) -> bool:
    while True:
        if _match_here(re, ri, s, si):
            return True
        if si < len(s) and (s[si] == c or c == "."):
            si += 1
        else:
            return False


def _find_line_end(buf: bytearray, start: int) -> int:
    newline = buf.find(b"\n", start)
    nul = buf.find(b"\0", start)
    if nul != -1 and (newline == -1 or nul < newline):
        return -1
    return newline


def grep_lines(pattern: Text, chunks: Iterable[bytes]) -> Iterator[bytes]:
    """Yield matching newline-terminated lines from successive reads.

    Each chunk is one read, capped to the free room of a 1024-byte buffer.
    A read that leaves no complete line in the buffer discards the buffer,
    and a final line without a newline is never reported.
    """
    pat = _as_text(pattern)
    source = iter(chunks)
    rest = b""
    buf = bytearray()
    while True:
        if not rest:
            rest = bytes(next(source, b""))
        room = BUFSIZE - len(buf)
        piece, rest = rest[:room], rest[room:]
        if not piece:
            return
        buf += piece
        start = 0
        while (end := _find_line_end(buf, start)) != -1:
            line = bytes(buf[start:end])
            if match(pat, line):
                yield line + b"\n"
            start = end + 1
        if start == 0:
            buf.clear()
        else:
            del buf[:start]
"""Small helpers from the user-level C library."""

from typing import IO, AnyStr

_MASK32 = 0xFFFFFFFF


def atoi(s: str) -> int:
    """Parse the leading decimal digits of ``s``; no sign, no whitespace."""
    n = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = (n * 10 + ord(ch) - ord("0")) & _MASK32
    return n - (1 << 32) if n & 0x80000000 else n


def gets(stream: IO[AnyStr], limit: int) -> AnyStr:
    """Read one line of at most ``limit - 1`` characters, one at a time.

    Reading stops after a newline or carriage return, which is kept.
    """
    empty = stream.read(0)
    chars = []
    while len(chars) + 1 < limit:
        c = stream.read(1)
        if not c:
            break
        chars.append(c)
        if c in ("\n", "\r", b"\n", b"\r"):
            break
    return empty.join(chars)
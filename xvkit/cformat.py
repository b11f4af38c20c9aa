"""The small printf used by user programs: %d, %x, %p, %s, %c and %%."""

_DIGITS = "0123456789ABCDEF"
_MASK32 = 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def format_int(value: int, base: int, signed: bool) -> str:
    """Render a 32-bit integer in ``base`` with upper-case digits."""
    if not 2 <= base <= len(_DIGITS):
        raise ValueError(f"unsupported base {base}")
    negative = False
    if signed and _to_int32(value) < 0:
        negative = True
        x = -_to_int32(value)
    else:
        x = value & _MASK32
    digits = []
    while True:
        x, rem = divmod(x, base)
        digits.append(_DIGITS[rem])
        if x == 0:
            break
    if negative:
        digits.append("-")
    return "".join(reversed(digits))


def _as_str(arg) -> str:
    if arg is None:
        return "(null)"
    if isinstance(arg, (bytes, bytearray)):
        return bytes(arg).decode("latin-1")
    return str(arg)


def _as_char(arg) -> str:
    if isinstance(arg, int):
        return chr(arg & 0xFF)
    text = _as_str(arg)
    return text[:1]


def format_printf(fmt: str, *args) -> str:
    """Expand ``fmt`` the way the user-level printf does."""
    out = []
    remaining = iter(args)

    def take():
        try:
            return next(remaining)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    in_escape = False
    for ch in fmt:
        if not in_escape:
            if ch == "%":
                in_escape = True
            else:
                out.append(ch)
            continue
        if ch == "d":
            out.append(format_int(take(), 10, True))
        elif ch in "xp":
            out.append(format_int(take(), 16, False))
        elif ch == "s":
            out.append(_as_str(take()))
        elif ch == "c":
            out.append(_as_char(take()))
        elif ch == "%":
            out.append("%")
        else:
            out.append("%" + ch)
        in_escape = False
    return "".join(out)
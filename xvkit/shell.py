"""Command-line parsing and command-name completion for the shell."""

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple, Union

from .layout import O_CREATE, O_RDONLY, O_WRONLY

MAXARGS = 10
DIRSIZ = 14
LINE_BUFSIZE = 100

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"


class ShellSyntaxError(ValueError):
    """The command line cannot be parsed."""

    def __init__(self, message: str, leftover: str = "") -> None:
        super().__init__(message)
        self.leftover = leftover


@dataclass
class ExecCmd:
    """Run a program with arguments; argv[0] names the program."""

    argv: List[str] = field(default_factory=list)


@dataclass
class RedirCmd:
    """Run ``cmd`` with descriptor ``fd`` reopened on ``file``."""

    cmd: "Command"
    file: str
    mode: int
    fd: int


@dataclass
class PipeCmd:
    """Feed the output of ``left`` into ``right``."""

    left: "Command"
    right: "Command"


@dataclass
class ListCmd:
    """Run ``left`` to completion, then ``right``."""

    left: "Command"
    right: "Command"


@dataclass
class BackCmd:
    """Run ``cmd`` in the background."""

    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]


class _Parser:
    def __init__(self, line: str) -> None:
        nul = line.find("\0")
        self.text = line if nul < 0 else line[:nul]
        self.pos = 0

    def _skip_space(self) -> None:
        text = self.text
        while self.pos < len(text) and text[self.pos] in WHITESPACE:
            self.pos += 1

    def peek(self, toks: str) -> bool:
        self._skip_space()
        return self.pos < len(self.text) and self.text[self.pos] in toks

    def token(self) -> Tuple[str, str]:
        """Consume one token; returns (kind, word). Kind "" means end of line."""
        self._skip_space()
        text = self.text
        start = self.pos
        if start >= len(text):
            return "", ""
        ch = text[start]
        if ch in "|();&<":
            kind = ch
            self.pos += 1
        elif ch == ">":
            kind = ">"
            self.pos += 1
            if self.pos < len(text) and text[self.pos] == ">":
                kind = "+"
                self.pos += 1
        else:
            kind = "a"
            while (
                self.pos < len(text)
                and text[self.pos] not in WHITESPACE
                and text[self.pos] not in SYMBOLS
            ):
                self.pos += 1
        word = text[start:self.pos]
        self._skip_space()
        return kind, word

    def parse_line(self) -> Command:
        cmd = self.parse_pipe()
        while self.peek("&"):
            self.token()
            cmd = BackCmd(cmd)
        if self.peek(";"):
            self.token()
            cmd = ListCmd(cmd, self.parse_line())
        return cmd

    def parse_pipe(self) -> Command:
        cmd = self.parse_exec()
        if self.peek("|"):
            self.token()
            cmd = PipeCmd(cmd, self.parse_pipe())
        return cmd

    def parse_redirs(self, cmd: Command) -> Command:
        while self.peek("<>"):
            kind, _ = self.token()
            file_kind, file = self.token()
            if file_kind != "a":
                raise ShellSyntaxError("missing file for redirection")
            if kind == "<":
                cmd = RedirCmd(cmd, file, O_RDONLY, 0)
            else:
                cmd = RedirCmd(cmd, file, O_WRONLY | O_CREATE, 1)
        return cmd

    def parse_block(self) -> Command:
        if not self.peek("("):
            raise ShellSyntaxError("parseblock")
        self.token()
        cmd = self.parse_line()
        if not self.peek(")"):
            raise ShellSyntaxError("syntax - missing )")
        self.token()
        return self.parse_redirs(cmd)

    def parse_exec(self) -> Command:
        if self.peek("("):
            return self.parse_block()
        exec_cmd = ExecCmd()
        ret = self.parse_redirs(exec_cmd)
        while not self.peek("|)&;"):
            kind, word = self.token()
            if kind == "":
                break
            if kind != "a":
                raise ShellSyntaxError("syntax")
            exec_cmd.argv.append(word)
            if len(exec_cmd.argv) >= MAXARGS:
                raise ShellSyntaxError("too many args")
            ret = self.parse_redirs(ret)
        return ret


def parse_command(line: str) -> Command:
    """Parse one command line into a command tree."""
    parser = _Parser(line)
    cmd = parser.parse_line()
    parser.peek("")
    if parser.pos != len(parser.text):
        leftover = parser.text[parser.pos:]
        raise ShellSyntaxError(f"syntax: leftovers: {leftover}", leftover)
    return cmd


def _dir_name(name: str) -> str:
    name = name[:DIRSIZ]
    nul = name.find("\0")
    return name if nul < 0 else name[:nul]


def _name_matches(name: str, prefix: str) -> bool:
    return len(prefix) <= DIRSIZ and name[:DIRSIZ].startswith(prefix)


def complete_command(line: str, names: Iterable[str]) -> Tuple[str, List[str]]:
    """Complete the command name of ``line`` at its last tab.

    Returns the new line and the directory names that matched, in order.
    Without a tab the line comes back without its trailing newline and no
    matches. With a tab the line is cut there; a single match replaces the
    first word (and everything after it) by the full name and a space.
    A newline is then appended if the line buffer has room.
    """
    if line.endswith("\n"):
        line = line[:-1]
    tabpos = line.rfind("\t")
    if tabpos < 0:
        return line, []

    text = line[:tabpos]
    start = 0
    while start < len(text) and text[start] == " ":
        start += 1
    end = start
    while end < len(text) and text[end] not in " \n":
        end += 1
    prefix = text[start:end]

    matches = [_dir_name(name) for name in names if _name_matches(name, prefix)]
    if len(matches) == 1:
        text = text[:start] + matches[0] + " "

    if len(text) < LINE_BUFSIZE - 1:
        text += "\n"
    return text, matches
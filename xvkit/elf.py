"""Reading ELF executable headers."""

import struct
from dataclasses import dataclass
from typing import Iterator

ELF_MAGIC = 0x464C457F

ELF_PROG_LOAD = 1

ELF_PROG_FLAG_EXEC = 1
ELF_PROG_FLAG_WRITE = 2
ELF_PROG_FLAG_READ = 4

_ELFHDR = struct.Struct("<I12sHHIIIIIHHHHHH")
_PROGHDR = struct.Struct("<8I")

ELFHDR_SIZE = _ELFHDR.size
PROGHDR_SIZE = _PROGHDR.size


class ElfError(ValueError):
    """The data is not a well-formed ELF image."""


@dataclass(frozen=True)
class ElfHeader:
    magic: int
    ident: bytes
    type: int
    machine: int
    version: int
    entry: int
    phoff: int
    shoff: int
    flags: int
    ehsize: int
    phentsize: int
    phnum: int
    shentsize: int
    shnum: int
    shstrndx: int


@dataclass(frozen=True)
class ProgramHeader:
    type: int
    off: int
    vaddr: int
    paddr: int
    filesz: int
    memsz: int
    flags: int
    align: int

    def is_loadable(self) -> bool:
        """True for segments that must be loaded into memory."""
        return self.type == ELF_PROG_LOAD


def parse_elf_header(data: bytes) -> ElfHeader:
    """Decode the file header at the start of ``data``."""
    if len(data) < ELFHDR_SIZE:
        raise ElfError("file too short for an ELF header")
    header = ElfHeader(*_ELFHDR.unpack_from(data, 0))
    if header.magic != ELF_MAGIC:
        raise ElfError(f"bad ELF magic 0x{header.magic:08x}")
    return header


def parse_program_header(data: bytes, offset: int) -> ProgramHeader:
    """Decode one program header located at ``offset``."""
    if offset < 0 or offset + PROGHDR_SIZE > len(data):
        raise ElfError(f"program header at offset {offset} lies outside the file")
    return ProgramHeader(*_PROGHDR.unpack_from(data, offset))


def iter_program_headers(data: bytes) -> Iterator[ProgramHeader]:
    """Yield every program header named by the file header."""
    header = parse_elf_header(data)
    for index in range(header.phnum):
        yield parse_program_header(data, header.phoff + index * PROGHDR_SIZE)
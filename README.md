# xvkit

xvkit collects the pieces of a small Unix-like teaching kernel as plain
Python that you can import, test and take apart. It needs nothing beyond the
Python standard library (3.10 or newer).

## Modules

- `xvkit.layout`: memory-layout and MMU arithmetic (`align_up`, `align_dn`,
  `pde_index`, `pte_index`, `pte_addr`, `pte_ap`, `v2p`, `p2v`), all in 32-bit
  arithmetic, together with constants for the address layout (`KERNBASE`,
  `PTE_SZ`, `UADDR_SZ`, ...), the system parameters (`NPROC`, `NOFILE`,
  `MAXARG`, `HZ`, ...) and the open-mode flags (`O_RDONLY`, `O_WRONLY`,
  `O_RDWR`, `O_CREATE`). The alignment functions raise `ValueError` for an
  alignment that is not a power of two.
- `xvkit.elf`: reading little-endian 32-bit ELF headers. `parse_elf_header`
  returns an `ElfHeader`, `parse_program_header` a `ProgramHeader` (with
  `is_loadable()`), and `iter_program_headers` yields every program header
  the file header names. Short data, a bad magic number or a header outside
  the data raise `ElfError`.
- `xvkit.vm`: a two-level user page table over a simulated pool of physical
  pages. `PhysicalMemory(npages)` hands out 4 KB pages (`alloc_page`,
  `free_page`, `read`, `write`). `AddressSpace(memory)` offers `walk`,
  `map_pages`, `init_uvm`, `load_uvm`, `alloc_uvm`, `dealloc_uvm`, `free`,
  `clear_pte_user`, `copy`, `uva2ka` and `copy_out`. Inconsistent tables or
  misuse raise `PageTableError`; running out of pages raises `MemoryError`.
- `xvkit.umalloc`: a first-fit, address-ordered free-list `Allocator` with
  coalescing, over a simulated heap that grows in steps of at least 4096
  eight-byte units up to `heap_limit` bytes. `malloc(nbytes)` returns an
  address or `None`; `free(address)` raises `ValueError` for an address it
  did not hand out; `free_blocks()` lists the free blocks.
- `xvkit.cformat`: the minimal printf of the user programs (`%d`, `%x`,
  `%p`, `%s`, `%c`, `%%`; unknown sequences are printed as they are) through
  `format_printf`, and `format_int` for upper-case digits in any base from 2
  to 16.
- `xvkit.ulib`: `atoi` (leading decimal digits only, no sign) and `gets`,
  which reads one line a character at a time from a stream.
- `xvkit.kpmatch`: the tiny regular-expression matcher (`^`, `.`, `*`, `$`)
  as `match`, and `grep_lines`, which filters newline-terminated lines out of
  successive reads through a 1024-byte buffer.
- `xvkit.shell`: the shell grammar (`;`, `&`, `|`, `<`, `>`, `>>`, and
  parentheses) parsed by `parse_command` into `ExecCmd`, `RedirCmd`,
  `PipeCmd`, `ListCmd` and `BackCmd` trees; at most nine arguments per
  command. `>>` produces the same redirection as `>`. Bad input raises
  `ShellSyntaxError`. `complete_command(line, names)` completes the command
  name at the last tab against a list of names.
- `xvkit.commands`: the small user programs as functions taking an argument
  list and returning an exit status: `cat_main`, `echo_main`, `grep_main`,
  `wc_main`, `ls_main`, `mkdir_main`, `rm_main`, `ln_main`, `kill_main`,
  `pause_main`, plus `word_count` and `fmtname`. They work on the host's
  files and processes.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Examples

Alignment and address arithmetic:

```python
from xvkit.layout import align_up, align_dn

align_up(5000, 4096)   # 8192
align_dn(5000, 4096)   # 4096
```

Matching lines the way the little grep does:

```python
from xvkit.kpmatch import match

match("^ab*c$", "abbbc")   # True
match("^ab*c$", "abd")     # False
```

Formatting with the minimal printf:

```python
from xvkit.cformat import format_printf

format_printf("%d %s\n", -5, "hi")   # "-5 hi\n"
```

Parsing a shell line into a command tree:

```python
from xvkit.shell import parse_command, PipeCmd

tree = parse_command("cat README | grep kernel > out")
isinstance(tree, PipeCmd)   # True
```

Building and tearing down a user address space:

```python
from xvkit.vm import PhysicalMemory, AddressSpace

memory = PhysicalMemory(64)
space = AddressSpace(memory)
space.alloc_uvm(0, 3 * 4096)
space.copy_out(100, b"hello")
space.free()
```

## Command line

Installing the package provides one command, `xvkit`, whose first argument
names one of the user programs: `cat`, `echo`, `grep`, `wc`, `ls`, `mkdir`,
`rm`, `ln`, `kill` or `pause`.

```
xvkit echo hello world
xvkit wc README.md
xvkit grep '^##' README.md
```

`kill` sends SIGKILL (SIGTERM where the platform has no SIGKILL) to each
pid and ignores failures; `pause` sleeps for whole seconds.

## What it does not do

xvkit is not a running kernel. There is no scheduler, no processes of its
own, no on-disk file system or disk image, no system calls and no console.
The page tables and the allocator work on simulated memory only. The shell
module parses and completes command lines but does not run them, and there
is no interactive shell; the command-line programs run on the host system's
files and processes.
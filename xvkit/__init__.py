"""Teaching-kernel toolkit: simulated page tables, ELF headers, allocator, shell parsing and user programs."""

__version__ = "0.1.0"
"""Two-level user page tables over a simulated pool of physical pages."""

from typing import Dict, List, Optional, Tuple

from .layout import (
    AP_KO,
    AP_KU,
    INIT_KERNMAP,
    NUM_PTE,
    NUM_UPDE,
    PDE_SZ,
    PE_BUF,
    PE_CACHE,
    PE_TYPES,
    PTE_SZ,
    PTE_TYPE,
    UADDR_SZ,
    align_dn,
    align_up,
    pde_index,
    pte_addr,
    pte_ap,
    pte_index,
)

PHYS_BASE = INIT_KERNMAP


class PageTableError(RuntimeError):
    """A page table operation found the tables in an impossible state."""


class PhysicalMemory:
    """A fixed pool of 4KB physical pages starting at ``PHYS_BASE``."""

    def __init__(self, npages: int = 256) -> None:
        if npages < 0:
            raise ValueError("npages must be non-negative")
        self._data = bytearray(npages * PTE_SZ)
        self._end = PHYS_BASE + npages * PTE_SZ
        self._free: List[int] = [PHYS_BASE + i * PTE_SZ for i in reversed(range(npages))]
        self._used: set = set()

    def alloc_page(self) -> Optional[int]:
        """Take one page from the pool; None when the pool is empty."""
        if not self._free:
            return None
        addr = self._free.pop()
        self._used.add(addr)
        return addr

    def free_page(self, addr: int) -> None:
        """Return a page to the pool."""
        if addr not in self._used:
            raise ValueError(f"page 0x{addr:x} is not allocated")
        self._used.remove(addr)
        self._free.append(addr)

    def _offset(self, addr: int, n: int) -> int:
        if n < 0 or addr < PHYS_BASE or addr + n > self._end:
            raise ValueError(f"physical range 0x{addr:x}+{n} is outside memory")
        return addr - PHYS_BASE

    def read(self, addr: int, n: int) -> bytes:
        """Read ``n`` bytes at physical address ``addr``."""
        start = self._offset(addr, n)
        return bytes(self._data[start:start + n])

    def write(self, addr: int, data: bytes) -> None:
        """Write ``data`` at physical address ``addr``."""
        start = self._offset(addr, len(data))
        self._data[start:start + len(data)] = data


def _make_pte(pa: int, ap: int) -> int:
    return pa | ((ap & 0x3) << 4) | PE_CACHE | PE_BUF | PTE_TYPE


class AddressSpace:
    """A user address space: a page directory of coarse page tables."""

    def __init__(self, memory: PhysicalMemory) -> None:
        self.memory = memory
        self._tables: Optional[Dict[int, List[int]]] = {}

    def _directory(self) -> Dict[int, List[int]]:
        if self._tables is None:
            raise PageTableError("no page directory")
        return self._tables

    def _slot(self, va: int, alloc: bool) -> Optional[Tuple[List[int], int]]:
        tables = self._directory()
        pdx = pde_index(va)
        if pdx >= NUM_UPDE:
            raise PageTableError(f"address 0x{va:x} is outside user space")
        table = tables.get(pdx)
        if table is None:
            if not alloc:
                return None
            table = tables[pdx] = [0] * NUM_PTE
        return table, pte_index(va)

    def walk(self, va: int, alloc: bool = False) -> Optional[int]:
        """Page table entry for ``va``; None if no page table covers it."""
        slot = self._slot(va, alloc)
        if slot is None:
            return None
        table, idx = slot
        return table[idx]

    def map_pages(self, va: int, size: int, pa: int, ap: int) -> None:
        """Map ``size`` bytes at ``va`` onto physical pages starting at ``pa``."""
        if size <= 0:
            raise ValueError("size must be positive")
        if pa % PTE_SZ:
            raise ValueError(f"physical address 0x{pa:x} is not page aligned")
        a = align_dn(va, PTE_SZ)
        last = align_dn(va + size - 1, PTE_SZ)
        while True:
            table, idx = self._slot(a, True)
            if table[idx] & PE_TYPES:
                raise PageTableError(f"remap of 0x{a:x}")
            table[idx] = _make_pte(pa, ap)
            if a == last:
                break
            a += PTE_SZ
            pa += PTE_SZ

    def init_uvm(self, init: bytes) -> None:
        """Load the first program, smaller than a page, at address 0."""
        if len(init) >= PTE_SZ:
            raise PageTableError("init_uvm: more than a page")
        mem = self.memory.alloc_page()
        if mem is None:
            raise MemoryError("out of physical pages")
        self.memory.write(mem, bytes(PTE_SZ))
        self.map_pages(0, PTE_SZ, mem, AP_KU)
        self.memory.write(mem, bytes(init))

    def load_uvm(self, addr: int, data: bytes, offset: int, size: int) -> None:
        """Copy ``size`` bytes of ``data`` from ``offset`` into mapped pages at ``addr``."""
        if addr % PTE_SZ:
            raise PageTableError("load_uvm: addr must be page aligned")
        for i in range(0, size, PTE_SZ):
            entry = self.walk(addr + i)
            if entry is None or not entry & PE_TYPES:
                raise PageTableError("load_uvm: address should exist")
            n = min(size - i, PTE_SZ)
            chunk = data[offset + i:offset + i + n]
            if len(chunk) != n:
                raise ValueError("load_uvm: source data ends early")
            self.memory.write(pte_addr(entry), bytes(chunk))

    def alloc_uvm(self, oldsz: int, newsz: int) -> int:
        """Grow the space from ``oldsz`` to ``newsz`` with zeroed pages."""
        if newsz >= UADDR_SZ:
            raise ValueError(f"size 0x{newsz:x} exceeds user address space")
        if newsz < oldsz:
            return oldsz
        for a in range(align_up(oldsz, PTE_SZ), newsz, PTE_SZ):
            mem = self.memory.alloc_page()
            if mem is None:
                self.dealloc_uvm(newsz, oldsz)
                raise MemoryError("alloc_uvm: out of memory")
            self.memory.write(mem, bytes(PTE_SZ))
            self.map_pages(a, PTE_SZ, mem, AP_KU)
        return newsz

    def dealloc_uvm(self, oldsz: int, newsz: int) -> int:
        """Shrink the space from ``oldsz`` to ``newsz``; returns the new size."""
        if newsz >= oldsz:
            return oldsz
        a = align_up(newsz, PTE_SZ)
        while a < oldsz and pde_index(a) < NUM_UPDE:
            slot = self._slot(a, False)
            if slot is None:
                a = align_up(a + 1, PDE_SZ)
                continue
            table, idx = slot
            entry = table[idx]
            if entry & PE_TYPES:
                pa = pte_addr(entry)
                if pa == 0:
                    raise PageTableError("dealloc_uvm: null page")
                self.memory.free_page(pa)
                table[idx] = 0
            a += PTE_SZ
        return newsz

    def free(self) -> None:
        """Release every user page and the page tables themselves."""
        self._directory()
        self.dealloc_uvm(UADDR_SZ, 0)
        self._tables = None

    def clear_pte_user(self, uva: int) -> None:
        """Make the page at ``uva`` kernel-only (a guard page)."""
        slot = self._slot(uva, False)
        if slot is None:
            raise PageTableError("clear_pte_user: no page table")
        table, idx = slot
        table[idx] = (table[idx] & ~(0x03 << 4)) | (AP_KO << 4)

    def copy(self, size: int) -> "AddressSpace":
        """A full copy of the first ``size`` bytes in a new address space."""
        child = AddressSpace(self.memory)
        for i in range(0, size, PTE_SZ):
            entry = self.walk(i)
            if entry is None:
                child.free()
                raise PageTableError("copy: pte should exist")
            if not entry & PE_TYPES:
                child.free()
                raise PageTableError("copy: page not present")
            mem = self.memory.alloc_page()
            if mem is None:
                child.free()
                raise MemoryError("copy: out of memory")
            self.memory.write(mem, self.memory.read(pte_addr(entry), PTE_SZ))
            child.map_pages(i, PTE_SZ, mem, pte_ap(entry))
        return child

    def uva2ka(self, uva: int) -> Optional[int]:
        """Physical page behind a user-accessible page, or None."""
        if pde_index(uva) >= NUM_UPDE:
            return None
        entry = self.walk(uva)
        if entry is None or not entry & PE_TYPES:
            return None
        if pte_ap(entry) != AP_KU:
            return None
        return pte_addr(entry)

    def copy_out(self, va: int, data: bytes) -> None:
        """Copy ``data`` to user address ``va``, across pages as needed."""
        view = memoryview(bytes(data))
        while view:
            va0 = align_dn(va, PTE_SZ)
            pa0 = self.uva2ka(va0)
            if pa0 is None:
                raise PageTableError(f"copy_out: 0x{va0:x} is not a user page")
            n = min(PTE_SZ - (va - va0), len(view))
            self.memory.write(pa0 + (va - va0), bytes(view[:n]))
            view = view[n:]
            va = va0 + PTE_SZ
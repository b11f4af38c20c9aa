"""First-fit free-list allocator over a simulated, growable heap."""

from typing import Dict, List, Optional, Set, Tuple

HEADER_SIZE = 8
MIN_GROW_UNITS = 4096

_BASE = 0
_HEAP_START = 1


class Allocator:
    """Circular, address-ordered free list with coalescing on free.

    Addresses are byte addresses in a simulated heap; each block is preceded
    by a one-unit header. The heap grows by at least ``MIN_GROW_UNITS`` units
    at a time and never past ``heap_limit`` bytes.
    """

    def __init__(self, heap_limit: int = 1 << 20) -> None:
        if heap_limit < 0:
            raise ValueError("heap_limit must be non-negative")
        self.heap_limit = heap_limit
        self._brk = _HEAP_START
        self._size: Dict[int, int] = {}
        self._next: Dict[int, int] = {}
        self._allocated: Set[int] = set()
        self._freep: Optional[int] = None

    def _sbrk(self, units: int) -> Optional[int]:
        if (self._brk - _HEAP_START + units) * HEADER_SIZE > self.heap_limit:
            return None
        start = self._brk
        self._brk += units
        return start

    def _morecore(self, nunits: int) -> Optional[int]:
        nunits = max(nunits, MIN_GROW_UNITS)
        hdr = self._sbrk(nunits)
        if hdr is None:
            return None
        self._size[hdr] = nunits
        self._release(hdr)
        return self._freep

    def malloc(self, nbytes: int) -> Optional[int]:
        """Return the address of a block of at least ``nbytes``, or None."""
        if nbytes < 0:
            raise ValueError("nbytes must be non-negative")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            self._next[_BASE] = _BASE
            self._size[_BASE] = 0
            self._freep = _BASE
        prevp = self._freep
        p = self._next[prevp]
        while True:
            if self._size[p] >= nunits:
                if self._size[p] == nunits:
                    self._next[prevp] = self._next.pop(p)
                else:
                    self._size[p] -= nunits
                    p += self._size[p]
                    self._size[p] = nunits
                self._freep = prevp
                self._allocated.add(p)
                return (p + 1) * HEADER_SIZE
            if p == self._freep:
                grown = self._morecore(nunits)
                if grown is None:
                    return None
                p = grown
            prevp = p
            p = self._next[p]

    def free(self, address: int) -> None:
        """Return a block obtained from :meth:`malloc` to the free list."""
        if address % HEADER_SIZE or address // HEADER_SIZE - 1 not in self._allocated:
            raise ValueError(f"address {address} was not allocated")
        bp = address // HEADER_SIZE - 1
        self._allocated.remove(bp)
        self._release(bp)

    def _release(self, bp: int) -> None:
        size, nxt = self._size, self._next
        p = self._freep
        while not (p < bp < nxt[p]):
            if p >= nxt[p] and (bp > p or bp < nxt[p]):
                break
            p = nxt[p]
        following = nxt[p]
        if bp + size[bp] == following:
            size[bp] += size.pop(following)
            nxt[bp] = nxt.pop(following)
        else:
            nxt[bp] = following
        if p + size[p] == bp:
            size[p] += size.pop(bp)
            nxt[p] = nxt.pop(bp)
        else:
            nxt[p] = bp
        self._freep = p

    def free_blocks(self) -> List[Tuple[int, int]]:
        """Free blocks as (header address, size in bytes), by address."""
        return sorted(
            (hdr * HEADER_SIZE, self._size[hdr] * HEADER_SIZE)
            for hdr in self._next
            if hdr != _BASE
        )
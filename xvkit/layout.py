"""Memory layout, MMU geometry, kernel parameters and open flags."""

_MASK32 = 0xFFFFFFFF

# Address space layout
EXTMEM = 0x20000
KERNBASE = 0x80000000
KERNLINK = KERNBASE + EXTMEM
INIT_KERNMAP = 0x100000

# Access permissions for page directory / page table entries
AP_NA = 0x00
AP_KO = 0x01
AP_KUR = 0x02
AP_KU = 0x03

# Domains
DM_NA = 0x00
DM_CLIENT = 0x01
DM_RESRVED = 0x02
DM_MANAGER = 0x03

PE_CACHE = 1 << 3
PE_BUF = 1 << 2

PE_TYPES = 0x03
KPDE_TYPE = 0x02
UPDE_TYPE = 0x01
PTE_TYPE = 0x02

# First-level (1MB) page directory
PDE_SHIFT = 20
PDE_SZ = 1 << PDE_SHIFT
PDE_MASK = PDE_SZ - 1

# Second-level page table
PTE_SHIFT = 12
PTE_SZ = 1 << PTE_SHIFT

UADDR_BITS = 28
UADDR_SZ = 1 << UADDR_BITS

NUM_UPDE = 1 << (UADDR_BITS - PDE_SHIFT)
NUM_PTE = 1 << (PDE_SHIFT - PTE_SHIFT)

PT_SZ = NUM_PTE << 2
PT_ORDER = 10

# Kernel parameters
NPROC = 64
KSTACKSIZE = 4096
NCPU = 8
NOFILE = 16
NFILE = 100
NBUF = 10
NINODE = 50
NDEV = 10
ROOTDEV = 1
MAXARG = 32
LOGSIZE = 10
HZ = 10
N_CALLSTK = 15

# Open flags
O_RDONLY = 0x000
O_WRONLY = 0x001
O_RDWR = 0x002
O_CREATE = 0x200


def _check_alignment(alignment: int) -> None:
    if alignment <= 0 or alignment & (alignment - 1):
        raise ValueError(f"alignment must be a power of two, got {alignment}")


def align_up(size: int, alignment: int) -> int:
    """Round ``size`` up to a multiple of ``alignment`` (32-bit arithmetic)."""
    _check_alignment(alignment)
    return ((size + alignment - 1) & ~(alignment - 1)) & _MASK32


def align_dn(size: int, alignment: int) -> int:
    """Round ``size`` down to a multiple of ``alignment`` (32-bit arithmetic)."""
    _check_alignment(alignment)
    return (size & ~(alignment - 1)) & _MASK32


def pde_index(va: int) -> int:
    """Index of the page directory entry covering ``va``."""
    return (va & _MASK32) >> PDE_SHIFT


def pte_index(va: int) -> int:
    """Index of the page table entry covering ``va`` within its table."""
    return ((va & _MASK32) >> PTE_SHIFT) & (NUM_PTE - 1)


def pte_addr(entry: int) -> int:
    """Physical page address held in a page table entry."""
    return align_dn(entry, PTE_SZ)


def pte_ap(entry: int) -> int:
    """Access permission bits of a page table entry."""
    return (entry >> 4) & 0x03


def v2p(addr: int) -> int:
    """Kernel virtual address to physical address."""
    return (addr - KERNBASE) & _MASK32


def p2v(addr: int) -> int:
    """Physical address to kernel virtual address."""
    return (addr + KERNBASE) & _MASK32
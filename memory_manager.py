PAGE_SIZE = 256
PAGE_COUNT = 64
PAGE_SHIFT = 8  # PAGE_SIZE == 1 << PAGE_SHIFT
MEM_SIZE = 16384

PROC_TABLE_BASE = 64  # process table lives right after the free page map in page 0
MAX_PROCESSES = PAGE_SIZE - PROC_TABLE_BASE
VIRTUAL_SIZE = PAGE_COUNT * PAGE_SIZE

OUT_OF_MEMORY = 0xFF

assert PAGE_SIZE * PAGE_COUNT == MEM_SIZE
assert 1 << PAGE_SHIFT == PAGE_SIZE


class PhysicalMemory:
    def __init__(self):
        self.mem = bytearray(MEM_SIZE)
        self.initialize()

    def initialize(self):
        self.mem[:] = bytes(MEM_SIZE)
        # Page 0 holds the free page map and process table, always in use
        self.mem[0] = 1

    def address(self, page, offset):
        if not 0 <= page < PAGE_COUNT:
            raise IndexError(f"physical page out of range: {page}")
        if not 0 <= offset < PAGE_SIZE:
            raise IndexError(f"page offset out of range: {offset}")
        return (page << PAGE_SHIFT) | offset

    def read_byte(self, page, offset):
        return self.mem[self.address(page, offset)]

    def write_byte(self, page, offset, value):
        self.mem[self.address(page, offset)] = value & 0xFF

    def read_address(self, addr):
        if not 0 <= addr < MEM_SIZE:
            raise IndexError(f"physical address out of range: {addr}")
        return self.mem[addr]

    def write_address(self, addr, value):
        if not 0 <= addr < MEM_SIZE:
            raise IndexError(f"physical address out of range: {addr}")
        self.mem[addr] = value & 0xFF


class PageAllocator:
    def __init__(self, memory):
        self.memory = memory

    def allocate_page(self):
        # Lowest numbered free page wins
        for page in range(PAGE_COUNT):
            if self.memory.read_byte(0, page) == 0:
                self.memory.write_byte(0, page, 1)
                return page
        return OUT_OF_MEMORY

    def _check(self, page):
        # The map is only PAGE_COUNT bytes, the process table follows it
        if not 0 <= page < PAGE_COUNT:
            raise IndexError(f"physical page out of range: {page}")

    def free_page(self, page):
        # No double free detection, the byte is simply cleared
        self._check(page)
        self.memory.write_byte(0, page, 0)

    def is_free(self, page):
        self._check(page)
        return self.memory.read_byte(0, page) == 0

    def free_count(self):
        return sum(1 for page in range(PAGE_COUNT) if self.is_free(page))

    def used_pages(self):
        return [page for page in range(PAGE_COUNT) if not self.is_free(page)]


class Statistics:
    def __init__(self):
        self.pages_allocated = 0
        self.pages_freed = 0
        self.oom_events = 0
        self.loads = 0
        self.stores = 0

    def record_allocation(self, page):
        if page == OUT_OF_MEMORY:
            self.oom_events += 1
        else:
            self.pages_allocated += 1

    def record_free(self):
        self.pages_freed += 1

    def __str__(self):
        return (f"Pages Allocated: {self.pages_allocated}\n"
                f"Pages Freed: {self.pages_freed}\n"
                f"OOM Events: {self.oom_events}\n"
                f"Loads: {self.loads}\n"
                f"Stores: {self.stores}")

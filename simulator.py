import argparse
import sys

from page_table import PageTable, ProcessTable
from memory_manager import (PhysicalMemory, PageAllocator, Statistics,
                            PAGE_COUNT, PAGE_SHIFT, PAGE_SIZE, VIRTUAL_SIZE,
                            OUT_OF_MEMORY)


class PageTableSimulator:

    def __init__(self):
        self.memory = PhysicalMemory()
        self.allocator = PageAllocator(self.memory)
        self.process_table = ProcessTable(self.memory)
        self.stats = Statistics()

    def reset(self):
        self.memory.initialize()
        self.stats = Statistics()

    def allocate_page(self):
        page = self.allocator.allocate_page()
        self.stats.record_allocation(page)
        return page

    def free_page(self, page):
        self.allocator.free_page(page)
        self.stats.record_free()

    def get_page_table(self, proc_num):
        return PageTable(self.memory, self.process_table.get_page_table(proc_num))

    def new_process(self, proc_num, page_count):
        # Large counts are fine, allocation runs out of pages first
        if page_count < 0:
            raise ValueError(f"page count must not be negative: {page_count}")
        # Fails on a bad process number before anything is allocated
        self.process_table.get_page_table(proc_num)

        page_table = self.allocate_page()
        if page_table == OUT_OF_MEMORY:
            print(f"OOM: proc {proc_num}: page table")
            return False

        # A recycled page may still hold a dead process's entries
        for virtual_page in range(PAGE_COUNT):
            self.memory.write_byte(page_table, virtual_page, 0)
        self.process_table.set_page_table(proc_num, page_table)
        table = PageTable(self.memory, page_table)

        for virtual_page in range(page_count):
            new_page = self.allocate_page()
            if new_page == OUT_OF_MEMORY:
                # Pages mapped so far stay with the process
                print(f"OOM: proc {proc_num} data page")
                return False
            table.set_entry(virtual_page, new_page)

        return True

    def kill_process(self, proc_num):
        page_table = self.process_table.get_page_table(proc_num)

        # A process that was never created has page table 0, so this walks
        # the free page map and then frees page 0 itself.
        for _, physical_page in PageTable(self.memory, page_table).mappings():
            self.free_page(physical_page)
        self.free_page(page_table)
        self.process_table.set_page_table(proc_num, 0)

    def parse_address(self, virtual_address):
        if not 0 <= virtual_address < VIRTUAL_SIZE:
            raise IndexError(f"virtual address out of range: {virtual_address}")
        page_num = virtual_address >> PAGE_SHIFT
        offset = virtual_address & (PAGE_SIZE - 1)
        return page_num, offset

    def get_physical_address(self, proc_num, virtual_address):
        page_num, offset = self.parse_address(virtual_address)
        # Unmapped pages come back as 0 and resolve into page 0
        physical_page = self.get_page_table(proc_num).get_entry(page_num)
        return self.memory.address(physical_page, offset)

    def store_byte(self, proc_num, virtual_address, value):
        addr = self.get_physical_address(proc_num, virtual_address)
        self.memory.write_address(addr, value)
        self.stats.stores += 1
        return addr

    def load_byte(self, proc_num, virtual_address):
        addr = self.get_physical_address(proc_num, virtual_address)
        self.stats.loads += 1
        return self.memory.read_address(addr)

    def format_page_free_map(self):
        lines = ["--- PAGE FREE MAP ---"]
        row = ""
        for page in range(PAGE_COUNT):
            row += "." if self.allocator.is_free(page) else "#"
            if (page + 1) % 16 == 0:
                lines.append(row)
                row = ""
        return "\n".join(lines)

    def format_page_table(self, proc_num):
        lines = [f"--- PROCESS {proc_num} PAGE TABLE ---"]
        for virtual_page, physical_page in self.get_page_table(proc_num).mappings():
            lines.append(f"{virtual_page:02x} -> {physical_page:02x}")
        return "\n".join(lines)

    def print_page_free_map(self):
        print(self.format_page_free_map())

    def print_page_table(self, proc_num):
        print(self.format_page_table(proc_num))

    def page_owners(self):
        owners = []
        for page in range(PAGE_COUNT):
            owners.append("free" if self.allocator.is_free(page) else "used")
        owners[0] = "reserved"

        for proc_num in self.process_table.live_processes():
            table = self.get_page_table(proc_num)
            owners[table.page] = f"pt:{proc_num}"
            for _, physical_page in table.mappings():
                owners[physical_page] = f"proc:{proc_num}"
        return owners

    def run_commands(self, tokens):
        tokens = list(tokens)
        i = 0

        def next_int(command):
            nonlocal i
            i += 1
            if i >= len(tokens):
                raise ValueError(f"{command}: missing argument")
            try:
                return int(tokens[i])
            except ValueError:
                raise ValueError(f"{command}: not an integer: {tokens[i]!r}") from None

        while i < len(tokens):
            command = tokens[i]
            if command == 'np':
                proc_num = next_int(command)
                page_count = next_int(command)
                self.new_process(proc_num, page_count)
            elif command == 'pfm':
                self.print_page_free_map()
            elif command == 'ppt':
                self.print_page_table(next_int(command))
            elif command == 'kp':
                self.kill_process(next_int(command))
            elif command == 'sb':
                proc_num = next_int(command)
                virtual_address = next_int(command)
                value = next_int(command)
                addr = self.store_byte(proc_num, virtual_address, value)
                print(f"Store proc {proc_num}: {virtual_address} => {addr}, value={value & 0xFF}")
            elif command == 'lb':
                proc_num = next_int(command)
                virtual_address = next_int(command)
                addr = self.get_physical_address(proc_num, virtual_address)
                value = self.load_byte(proc_num, virtual_address)
                print(f"Load proc {proc_num}: {virtual_address} => {addr}, value={value}")
            else:
                raise ValueError(f"unknown command: {command!r}")
            i += 1

    def run_simulation(self, filename):
        tokens = []
        with open(filename, 'r') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                tokens.extend(line.split())

        self.run_commands(tokens)
        return self.stats


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='ptsim', description="Single-level page table simulator")
    parser.add_argument('commands', nargs='*',
                        help="np, pfm, ppt, kp, sb and lb commands with their arguments")
    parser.add_argument('-f', '--file', help="read commands from a script file first")
    parser.add_argument('--stats', action='store_true',
                        help="print allocation statistics when done")
    args = parser.parse_intermixed_args(argv)

    if not args.commands and not args.file:
        print("usage: ptsim commands", file=sys.stderr)
        return 1

    simulator = PageTableSimulator()
    try:
        if args.file:
            simulator.run_simulation(args.file)
        simulator.run_commands(args.commands)
    except (ValueError, IndexError, OSError) as e:
        print(f"ptsim: {e}", file=sys.stderr)
        return 1

    if args.stats:
        print(simulator.stats)
    return 0


if __name__ == '__main__':
    sys.exit(main())

from memory_manager import PAGE_COUNT, PROC_TABLE_BASE, MAX_PROCESSES


class PageTable:
    """View over the physical page holding one process's page table.

    Byte i of the page is the physical page mapped at virtual page i,
    0 meaning unmapped.
    """

    def __init__(self, memory, page):
        self.memory = memory
        self.page = page

    def _check(self, virtual_page):
        if not 0 <= virtual_page < PAGE_COUNT:
            raise IndexError(f"virtual page out of range: {virtual_page}")

    def get_entry(self, virtual_page):
        self._check(virtual_page)
        return self.memory.read_byte(self.page, virtual_page)

    def set_entry(self, virtual_page, physical_page):
        self._check(virtual_page)
        self.memory.write_byte(self.page, virtual_page, physical_page)

    def mappings(self):
        entries = []
        for virtual_page in range(PAGE_COUNT):
            physical_page = self.get_entry(virtual_page)
            if physical_page != 0:
                entries.append((virtual_page, physical_page))
        return entries


class ProcessTable:
    def __init__(self, memory):
        self.memory = memory

    def _offset(self, proc_num):
        if not 0 <= proc_num < MAX_PROCESSES:
            raise IndexError(f"process number out of range: {proc_num}")
        return PROC_TABLE_BASE + proc_num

    def set_page_table(self, proc_num, page):
        self.memory.write_byte(0, self._offset(proc_num), page)

    def get_page_table(self, proc_num):
        # 0 means the process was never created
        return self.memory.read_byte(0, self._offset(proc_num))

    def live_processes(self):
        return [proc_num for proc_num in range(MAX_PROCESSES)
                if self.get_page_table(proc_num) != 0]

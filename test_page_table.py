import pytest

from memory_manager import PhysicalMemory, PAGE_COUNT, PROC_TABLE_BASE, MAX_PROCESSES
from page_table import PageTable, ProcessTable


def test_entries_live_in_the_page():
    memory = PhysicalMemory()
    table = PageTable(memory, 5)
    table.set_entry(3, 9)
    assert table.get_entry(3) == 9
    assert memory.read_byte(5, 3) == 9


def test_mappings_skip_unmapped_slots():
    table = PageTable(PhysicalMemory(), 2)
    table.set_entry(7, 4)
    table.set_entry(0, 12)
    assert table.mappings() == [(0, 12), (7, 4)]


def test_virtual_page_out_of_range():
    table = PageTable(PhysicalMemory(), 2)
    with pytest.raises(IndexError):
        table.get_entry(PAGE_COUNT)
    with pytest.raises(IndexError):
        table.set_entry(-1, 3)


def test_process_table_starts_empty():
    processes = ProcessTable(PhysicalMemory())
    assert all(processes.get_page_table(n) == 0 for n in range(MAX_PROCESSES))
    assert processes.live_processes() == []


def test_process_table_is_stored_in_page_zero():
    memory = PhysicalMemory()
    processes = ProcessTable(memory)
    processes.set_page_table(3, 17)
    assert memory.read_byte(0, PROC_TABLE_BASE + 3) == 17
    assert processes.get_page_table(3) == 17
    assert processes.live_processes() == [3]


def test_process_number_out_of_range():
    processes = ProcessTable(PhysicalMemory())
    with pytest.raises(IndexError):
        processes.get_page_table(MAX_PROCESSES)
    with pytest.raises(IndexError):
        processes.set_page_table(-1, 1)

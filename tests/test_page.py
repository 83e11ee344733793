import pytest

from bonsaidb.page import CAPACITY, HEADER_SIZE, PAGE_SIZE, Page
from bonsaidb.record import Record


def _record(i):
    return Record(i, f"User{i}", 20 + i % 50, 100.0 * i)


def test_new_page_is_empty():
    page = Page()
    assert page.num_records == 0
    assert page.records() == []
    assert page.free_space == PAGE_SIZE - HEADER_SIZE


def test_records_start_after_id_and_count_header():
    record = _record(5)
    data = Page([record]).serialize()
    assert Page().free_space == PAGE_SIZE - 6
    assert data[6:6 + Record.size()] == record.serialize()


def test_add_record_uses_record_size():
    page = Page()
    before = page.free_space
    assert page.add_record(_record(1))
    assert page.num_records == 1
    assert before - page.free_space == Record.size()


def test_fill_until_full():
    page = Page()
    added = 0
    while page.add_record(_record(added)):
        added += 1
    assert added == CAPACITY
    assert page.num_records == CAPACITY
    assert page.free_space < Record.size()


def test_default_page_holds_61_records():
    page = Page()
    added = 0
    while page.add_record(_record(added)):
        added += 1
    assert added == 61
    assert page.num_records == 61


def test_full_page_rejects_and_keeps_contents():
    page = Page(_record(i) for i in range(CAPACITY))
    assert not page.add_record(_record(999))
    assert page.records()[-1] == _record(CAPACITY - 1)


def test_constructor_rejects_overflow():
    with pytest.raises(ValueError):
        Page(_record(i) for i in range(CAPACITY + 1))


def test_serialize_has_page_size():
    page = Page([_record(1), _record(2)])
    assert len(page.serialize()) == PAGE_SIZE


def test_round_trip_preserves_records_in_order():
    records = [_record(i) for i in range(10)]
    restored = Page.deserialize(Page(records).serialize())
    assert restored.records() == records
    assert restored.num_records == len(records)


def test_round_trip_full_page():
    records = [_record(i) for i in range(CAPACITY)]
    assert Page.deserialize(Page(records).serialize()).records() == records


def test_header_holds_record_count():
    records = [_record(i) for i in range(3)]
    data = Page(records).serialize()
    assert int.from_bytes(data[4:6], "little") == len(records)


def test_page_id_round_trip():
    page = Page([_record(1)], page_id=17)
    assert Page.deserialize(page.serialize()).page_id == 17


def test_zero_buffer_is_empty_page():
    page = Page.deserialize(bytes(PAGE_SIZE))
    assert page.num_records == 0
    assert page.records() == []


def test_deserialize_wrong_size_raises():
    with pytest.raises(ValueError):
        Page.deserialize(bytes(PAGE_SIZE - 1))


def test_deserialize_corrupt_count_raises():
    data = bytearray(PAGE_SIZE)
    data[4:6] = (CAPACITY + 1).to_bytes(2, "little")
    with pytest.raises(ValueError):
        Page.deserialize(bytes(data))


def test_records_returns_a_copy():
    page = Page([_record(1)])
    page.records().append(_record(2))
    assert page.num_records == 1


def test_invalid_record_is_not_added():
    page = Page()
    with pytest.raises(ValueError):
        page.add_record(Record(2**40, "x", 1, 1.0))
    assert page.num_records == 0
from __future__ import annotations

import io
import struct

import pytest

from visitedlink import slots
from visitedlink.errors import TableIOError
from visitedlink.slots import probe, read_slot, slot_offset, toggle

from conftest import table_bytes


class CountingBuffer(io.BytesIO):
    def __init__(self, data):
        super().__init__(data)
        self.reads = 0

    def read(self, *args):
        self.reads += 1
        return super().read(*args)


def slot_at(buf, index):
    return struct.unpack_from("<Q", buf.getvalue(), slot_offset(index))[0]


def test_read_slot_tags_empty_as_none():
    buf = io.BytesIO(struct.pack("<QQ", 0, 42))
    assert read_slot(buf) is None
    assert read_slot(buf) == 42
    with pytest.raises(EOFError):
        read_slot(buf)


def test_probe_stops_at_first_empty_slot():
    length = 8
    fp_c = 2 + length * 1000          # starts at slot 2
    buf = CountingBuffer(table_bytes(length=length, slots=[0, 0, 111, 222, 0, fp_c]))
    assert probe(buf, fp_c, 2) is False
    assert buf.reads == 3


def test_probe_finds_fingerprint_later_in_chain():
    buf = io.BytesIO(table_bytes(length=8, slots=[0, 0, 111, 222, 333]))
    assert probe(buf, 333, 2) is True
    assert probe(buf, 111, 2) is True


def test_probe_does_not_wrap_past_the_end():
    # slot 0 holds the fingerprint, but the chain from slot 2 runs off the end
    buf = io.BytesIO(table_bytes(length=4, slots=[77, 0, 1, 2]))
    assert probe(buf, 77, 2) is False


def test_probe_treats_io_errors_as_not_visited():
    buf = io.BytesIO(table_bytes(length=4))
    buf.close()
    assert probe(buf, 5, 0) is False


def test_toggle_writes_into_the_terminal_slot():
    buf = io.BytesIO(table_bytes(length=8, slots=[0, 0, 111, 222]))
    assert toggle(buf, 999, 2) is True
    assert slot_at(buf, 4) == 999
    assert [slot_at(buf, i) for i in (2, 3)] == [111, 222]
    assert probe(buf, 999, 2) is True


def test_toggle_twice_restores_the_table():
    before = table_bytes(length=8, slots=[0, 0, 111])
    buf = io.BytesIO(before)
    assert toggle(buf, 999, 2) is True
    assert toggle(buf, 999, 2) is False
    assert buf.getvalue() == before
    assert probe(buf, 999, 2) is False


def test_toggle_off_the_end_raises_and_leaves_table_untouched():
    before = table_bytes(length=4, slots=[0, 0, 1, 2])
    buf = io.BytesIO(before)
    with pytest.raises(TableIOError):
        toggle(buf, 77, 2)
    assert buf.getvalue() == before


def test_insert_and_remove_are_one_directional():
    buf = io.BytesIO(table_bytes(length=4))
    assert slots.insert(buf, 9, 1) is True
    assert slots.insert(buf, 9, 1) is False
    assert slot_at(buf, 1) == 9
    assert slots.remove(buf, 9, 1) is True
    assert slots.remove(buf, 9, 1) is False
    assert slot_at(buf, 1) == 0


def test_write_slot_fsyncs_real_files(tmp_path, monkeypatch):
    path = tmp_path / "t"
    path.write_bytes(table_bytes(length=2))
    synced = []
    monkeypatch.setattr(slots.os, "fsync", synced.append)
    with open(path, "r+b", buffering=0) as f:
        slots.write_slot(f, 1, 123)
        assert synced == [f.fileno()]
    assert struct.unpack_from("<Q", path.read_bytes(), slot_offset(1))[0] == 123


class ShortWriteBuffer(io.BytesIO):
    def write(self, data):
        return super().write(data[:3])


def test_short_write_is_an_update_error():
    buf = ShortWriteBuffer(table_bytes(length=4))
    with pytest.raises(TableIOError, match="short write"):
        toggle(buf, 9, 1)

import threading

import pytest

from lcukit.autocover import AutoCoverBuffer, DataCoveredError, DataNotEnoughError


def test_invalid_capacity():
    with pytest.raises(ValueError):
        AutoCoverBuffer(1)


def test_capacity_rounded_to_power_of_two():
    buf = AutoCoverBuffer(6)
    data = b"01234567"
    assert buf.write(data) == len(data)
    assert buf.available_read(0) == len(data)


def test_write_larger_than_capacity_rejected():
    buf = AutoCoverBuffer(8)
    with pytest.raises(ValueError):
        buf.write(b"x" * 9)


def test_sequential_read():
    buf = AutoCoverBuffer(8)
    buf.write(b"abcdefgh")
    assert buf.read(0, 4) == b"abcd"
    assert buf.read(4, 4) == b"efgh"


def test_overwrite_discards_oldest():
    buf = AutoCoverBuffer(8)
    buf.write(b"01234567")
    buf.write(b"89")
    assert buf.available_read(2) == 8
    assert buf.read(2, 8) == b"23456789"


def test_read_skips_older_data():
    buf = AutoCoverBuffer(8)
    buf.write(b"abcdefgh")
    assert buf.read(0, 4) == b"abcd"
    buf.write(b"ijkl")
    assert buf.read(8, 4) == b"ijkl"


def test_consumed_position_is_covered():
    buf = AutoCoverBuffer(8)
    buf.write(b"abcdef")
    buf.read(0, 2)
    with pytest.raises(DataCoveredError):
        buf.available_read(1)
    with pytest.raises(DataCoveredError):
        buf.read(1, 1)


def test_position_past_written_data_is_covered():
    buf = AutoCoverBuffer(8)
    buf.write(b"abcdef")
    with pytest.raises(DataCoveredError):
        buf.available_read(6)


def test_empty_buffer_has_nothing_to_read():
    buf = AutoCoverBuffer(8)
    with pytest.raises(DataCoveredError):
        buf.available_read(0)


def test_not_enough_data_leaves_buffer_intact():
    buf = AutoCoverBuffer(8)
    buf.write(b"abcdef")
    assert buf.available_read(4) == 2
    with pytest.raises(DataNotEnoughError):
        buf.read(4, 3)
    assert buf.read(0, 6) == b"abcdef"


def test_available_read_counts_from_position():
    buf = AutoCoverBuffer(16)
    data = b"abcdefghij"
    buf.write(data)
    for pos in range(len(data)):
        assert buf.available_read(pos) == len(data) - pos


def test_works_with_lock():
    buf = AutoCoverBuffer(8, threading.Lock())
    buf.write(b"xyz")
    assert buf.read(0, 3) == b"xyz"


def test_non_positive_size_rejected():
    buf = AutoCoverBuffer(8)
    buf.write(b"abc")
    with pytest.raises(ValueError):
        buf.read(0, 0)
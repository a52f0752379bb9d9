import pytest

from lcukit.ringbuffer import HEADER_SIZE, RingBuffer


def test_capacity_power_of_two_kept():
    assert RingBuffer(64).capacity() == 64


def test_capacity_rounded_up():
    assert RingBuffer(100).capacity() == 128


def test_too_small_capacity():
    with pytest.raises(ValueError):
        RingBuffer(1)


def test_with_memory_rounds_down():
    ring = RingBuffer.with_memory(HEADER_SIZE + 100)
    assert ring.capacity() == 64


def test_with_memory_exact_power():
    assert RingBuffer.with_memory(HEADER_SIZE + 32).capacity() == 32


def test_with_memory_too_small():
    with pytest.raises(ValueError):
        RingBuffer.with_memory(HEADER_SIZE + 3)


def test_write_read_round_trip():
    ring = RingBuffer(16)
    data = b"hello world"
    assert ring.write(data) == len(data)
    assert ring.available_read() == len(data)
    assert ring.read(len(data)) == data
    assert ring.is_empty()


def test_partial_write_when_full():
    ring = RingBuffer(8)
    data = b"0123456789"
    assert ring.write(data) == ring.capacity()
    assert ring.is_full()
    assert ring.write(b"x") == 0
    assert ring.read(100) == data[: ring.capacity()]


def test_partial_read():
    ring = RingBuffer(8)
    ring.write(b"abc")
    assert ring.read(10) == b"abc"
    assert ring.read(1) == b""


def test_wraparound_preserves_order():
    ring = RingBuffer(8)
    ring.write(b"abcdef")
    assert ring.read(5) == b"abcde"
    assert ring.write(b"ghijkl") == 6
    assert ring.read(7) == b"fghijkl"
    assert ring.read_position() == ring.write_position()


def test_peek_does_not_consume():
    ring = RingBuffer(8)
    ring.write(b"xyz")
    assert ring.peek(2) == b"xy"
    assert ring.available_read() == 3
    assert ring.read(3) == b"xyz"


def test_discard():
    ring = RingBuffer(8)
    ring.write(b"abcd")
    assert ring.discard(2) == 2
    assert ring.read(2) == b"cd"
    assert ring.discard(5) == 0


def test_clear_resets_positions():
    ring = RingBuffer(8)
    ring.write(b"abc")
    ring.read(1)
    ring.clear()
    assert ring.read_position() == 0
    assert ring.write_position() == 0
    assert ring.is_empty()


def test_positions_are_free_running():
    ring = RingBuffer(4)
    for _ in range(5):
        ring.write(b"ab")
        ring.read(2)
    assert ring.write_position() == 10
    assert ring.read_position() == ring.write_position()


def test_available_sum_invariant():
    ring = RingBuffer(16)
    for chunk in (b"a" * 5, b"b" * 7, b"c" * 9):
        ring.write(chunk)
        assert ring.available_read() + ring.available_write() == ring.capacity()
        ring.read(3)
        assert ring.available_read() + ring.available_write() == ring.capacity()


def test_empty_write_and_zero_read():
    ring = RingBuffer(4)
    assert ring.write(b"") == 0
    assert ring.read(0) == b""


def test_negative_size_rejected():
    ring = RingBuffer(4)
    with pytest.raises(ValueError):
        ring.read(-1)
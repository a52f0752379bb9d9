import pytest

from lcukit.fixedqueue import FixedMessageQueue


@pytest.mark.parametrize("size,count", [(0, 4), (4, 0)])
def test_invalid_dimensions(size, count):
    with pytest.raises(ValueError):
        FixedMessageQueue(size, count)


def test_too_little_memory_rejected():
    with pytest.raises(ValueError):
        FixedMessageQueue(4, 4)


def test_starts_empty():
    q = FixedMessageQueue(4, 32)
    assert q.is_empty()
    assert q.available_pop() == 0
    assert q.pop() is None
    assert q.available_push() > 0


def test_fifo_until_full():
    q = FixedMessageQueue(4, 32)
    capacity = q.available_push()
    messages = [bytes([i]) * 4 for i in range(capacity)]
    for msg in messages:
        assert q.push(msg) is True
    assert q.is_full()
    assert q.available_pop() == capacity
    assert q.push(b"zzzz") is False
    assert [q.pop() for _ in range(capacity)] == messages
    assert q.is_empty()


def test_wrong_message_size():
    q = FixedMessageQueue(4, 32)
    with pytest.raises(ValueError):
        q.push(b"abc")


def test_interleaved_push_pop_wraps():
    q = FixedMessageQueue(3, 40)
    for i in range(200):
        msg = bytes([i % 256, 1, 2])
        assert q.push(msg)
        assert q.pop() == msg
    assert q.is_empty()


def test_push_and_pop_counts_stay_consistent():
    q = FixedMessageQueue(4, 32)
    total = q.available_push()
    q.push(b"aaaa")
    q.push(b"bbbb")
    assert q.available_pop() == 2
    assert q.available_push() == total - 2


def test_clear():
    q = FixedMessageQueue(4, 32)
    q.push(b"abcd")
    q.clear()
    assert q.is_empty()
    assert q.pop() is None
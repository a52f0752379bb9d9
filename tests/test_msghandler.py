import threading

import pytest

from lcukit.msghandler import HandlerStatus, MessageQueueHandler
from lcukit.msgqueue import HEADER_SIZE, QueueFullError

TIMEOUT = 5.0


def test_messages_are_delivered_in_order():
    received = []
    done = threading.Event()
    expected = [b"one", b"two", b"three", b"four"]

    def handle(message):
        received.append(message)
        if len(received) == len(expected):
            done.set()

    with MessageQueueHandler(1024, handle) as handler:
        for message in expected:
            handler.push(message)
        assert done.wait(TIMEOUT)
        assert handler.available_pop_bytes() == 0
    assert received == expected


def test_status_changes_are_reported():
    statuses = []
    ready = threading.Event()

    def on_status(status):
        statuses.append(status)
        if status is HandlerStatus.READY_TO_GO:
            ready.set()

    handler = MessageQueueHandler(256, lambda m: None, on_status)
    assert ready.wait(TIMEOUT)
    assert handler.available_pop_bytes() == 0
    handler.close()
    assert statuses == [HandlerStatus.READY_TO_GO, HandlerStatus.ABOUT_TO_STOP]


def test_nonzero_result_stops_worker():
    stopped = threading.Event()
    seen = []

    def handle(message):
        seen.append(message)
        return -1

    def on_status(status):
        if status is HandlerStatus.ABOUT_TO_STOP:
            stopped.set()

    handler = MessageQueueHandler(256, handle, on_status)
    handler.push(b"bad")
    assert stopped.wait(TIMEOUT)
    with pytest.raises(RuntimeError):
        handler.push(b"more")
    handler.close()
    assert seen == [b"bad"]


def test_exception_in_handler_stops_worker():
    stopped = threading.Event()

    def handle(message):
        raise ValueError("boom")

    def on_status(status):
        if status is HandlerStatus.ABOUT_TO_STOP:
            stopped.set()

    handler = MessageQueueHandler(256, handle, on_status)
    handler.push(b"x")
    assert stopped.wait(TIMEOUT)
    with pytest.raises(RuntimeError):
        handler.push(b"y")
    handler.close()


def test_queue_full_and_byte_counts():
    entered = threading.Event()
    release = threading.Event()

    def handle(message):
        entered.set()
        release.wait(TIMEOUT)

    handler = MessageQueueHandler(64, handle)
    try:
        first = bytes(28)
        second = bytes(range(28))
        handler.push(first)
        assert entered.wait(TIMEOUT)
        handler.push(second)
        assert handler.available_pop_bytes() == HEADER_SIZE + len(second)
        assert handler.available_push_bytes() == 0
        with pytest.raises(QueueFullError):
            handler.push(b"z")
    finally:
        release.set()
        handler.close()


def test_push_after_close_raises():
    handler = MessageQueueHandler(256, lambda m: 0)
    handler.close()
    handler.close()
    with pytest.raises(RuntimeError):
        handler.push(b"late")


def test_context_manager_closes():
    with MessageQueueHandler(256, lambda m: None) as handler:
        assert isinstance(handler, MessageQueueHandler)
    with pytest.raises(RuntimeError):
        handler.push(b"after")


def test_empty_message_rejected():
    with MessageQueueHandler(256, lambda m: None) as handler:
        with pytest.raises(ValueError):
            handler.push(b"")


@pytest.mark.parametrize("size", [0, 3])
def test_too_small_buffer_rejected(size):
    with pytest.raises(ValueError):
        MessageQueueHandler(size, lambda m: None)


def test_non_callable_handler_rejected():
    with pytest.raises(TypeError):
        MessageQueueHandler(256, None)
# lcukit

Small, dependency-free building blocks for byte-level buffering, message
passing, memory bookkeeping and text handling. It is a library only; it
installs no commands.

## Installation

```
pip install lcukit
```

To run the test suite, install the test extra and run pytest:

```
pip install "lcukit[test]"
pytest
```

## What is inside

| Module | Contents |
| --- | --- |
| `lcukit.textutil` | `str_replace`, `str_split`, `str_trim`, `utf8_len`, `hex_dump` |
| `lcukit.stringbuilder` | `StringBuilder`, a text accumulator whose capacity doubles as it grows |
| `lcukit.urlcodec` | `url_encode` / `url_decode` for form-style encoding, raising `UrlCodecError` |
| `lcukit.strparams` | `StrParams`, a `key=value;key=value` parameter store |
| `lcukit.ringbuffer` | `RingBuffer`, a power-of-two byte FIFO that moves as much data as fits |
| `lcukit.ringbuf` | `ByteRing`, an all-or-nothing byte FIFO of any size that keeps one slot free |
| `lcukit.autocover` | `AutoCoverBuffer`, a ring that overwrites its oldest data and is read by absolute position |
| `lcukit.fixedqueue` | `FixedMessageQueue`, a queue of fixed-size messages |
| `lcukit.msgqueue` | `MessageQueue`, a queue of variable-size, length-prefixed messages |
| `lcukit.mplite` | `MemoryPool`, a buddy allocator over a fixed byte pool, with `PoolStats` |
| `lcukit.tracker` | `AllocationTracker` and `Allocation`: records blocks, guards them with canaries, reports leaks |
| `lcukit.allocator` | `Allocator`: `malloc`, `calloc`, `realloc`, `strdup`, `strndup`, `free` on top of a tracker |
| `lcukit.msghandler` | `MessageQueueHandler`, a worker thread that drains a `MessageQueue` |

## Examples

### Text helpers

```python
from lcukit.textutil import str_split, str_trim, utf8_len, hex_dump

assert str_split("a,,b;c", ",;") == ["a", "b", "c"]
assert str_trim("AA...AA.a.aa.aHelloWorld     :::", "Aa. :") == "HelloWorld"
assert utf8_len("héllo") == 5
assert hex_dump(b"\x01\xab") == " 01 ab"
```

`hex_dump(data, capacity)` treats `capacity` as a buffer size; when the dump
would not fit it starts with `hex truncated(N):` and shows only what fits.

### String builder

```python
from lcukit.stringbuilder import StringBuilder

sb = StringBuilder()
sb.append("value=").append_format("%d", 42).append_char("!")
assert str(sb) == "value=42!"
assert len(sb) == 9
```

Appending empty text raises `ValueError`.

### URL encoding

```python
from lcukit.urlcodec import url_encode, url_decode

assert url_encode(b"a b&c") == "a+b%26c"
decoded, consumed = url_decode("a+b%26c")
assert decoded == b"a b&c" and consumed == 7
```

`url_decode` stops early at an incomplete `%` escape or when `max_size - 1`
bytes have been produced, and reports how many input bytes it used.

### Parameter strings

```python
from lcukit.strparams import StrParams

params = StrParams.parse("rate=44100;channels=2;mode")
assert params.get_int("rate") == 44100
assert "mode" in params and params.get_str("mode") == ""
params.add_str("codec", "pcm")
print(params.to_string())
```

`get_int` accepts `0x` hex and leading-`0` octal; `get_float` accepts what a
C `strtod` would. Missing keys raise `KeyError`, malformed numbers `ValueError`.

### Ring buffers

```python
from lcukit.ringbuffer import RingBuffer
from lcukit.ringbuf import ByteRing

ring = RingBuffer(8)
ring.write(b"hello")
assert ring.peek(2) == b"he"
assert ring.read(5) == b"hello"
assert ring.is_empty()

small = ByteRing(5)            # holds at most 4 bytes
assert small.write(b"abcde") == 0
assert small.write(b"abcd") == 4
```

### Overwriting buffer

```python
from lcukit.autocover import AutoCoverBuffer, DataCoveredError

buf = AutoCoverBuffer(8)
buf.write(b"abcdef")
assert buf.read(2, 3) == b"cde"   # bytes before position 2 are dropped
try:
    buf.available_read(0)
except DataCoveredError:
    pass
```

`read` raises `DataNotEnoughError` when fewer bytes than asked for are stored.

### Message queues

```python
from lcukit.fixedqueue import FixedMessageQueue
from lcukit.msgqueue import MessageQueue

fixed = FixedMessageQueue(4, 16)
assert fixed.available_push() == 8   # part of the memory goes to bookkeeping
fixed.push(b"abcd")
assert fixed.pop() == b"abcd"

queue = MessageQueue(64)
queue.push(b"first")
queue.push(b"second")
assert queue.next_message_size() == 5
assert queue.pop(1024) == b"first"
```

`MessageQueue.push` raises `QueueFullError`; `pop` raises `QueueEmptyError`,
`IncompleteMessageError` or `BufferTooSmallError` (whose `size` tells the
message length).

### Memory pool

```python
from lcukit.mplite import MemoryPool

pool = MemoryPool(4096, 16)
offset = pool.malloc(100)      # rounded up to 128 bytes
pool.view(offset, 5)[:] = b"abcde"
pool.free(offset)
print(pool.stats())
pool.print_stats(print)
```

Allocations are identified by their offset into the pool. `malloc` raises
`MemoryError` when no free block is large enough. An optional `lock`, any
context manager such as `threading.Lock()`, guards the free lists.

### Allocation tracking

```python
from lcukit.tracker import AllocationTracker
from lcukit.allocator import Allocator

tracker = AllocationTracker()
alloc = Allocator(tracker)
block = alloc.malloc(16, "main.py", "main", 10)
block.data[:4] = b"abcd"
assert tracker.expect_no_allocations(lambda leak: None) == 16
alloc.free(block)
assert tracker.expect_no_allocations() == 0
```

Freeing a block twice or through the wrong allocator raises `TrackingError`;
a block whose canaries were overwritten raises `MemoryCorruptionError` when
freed or checked.

### Background message handler

```python
from lcukit.msghandler import MessageQueueHandler

def handle(message: bytes) -> int:
    print("got", message)
    return 0  # any other value, or an exception, stops the worker

with MessageQueueHandler(1024, handle) as handler:
    handler.push(b"ping")
```

## What it does not do

`Allocator` and `AllocationTracker` keep track of `Allocation` objects they
hand out; they do not hook into or measure Python's own memory use. Likewise
`MemoryPool` manages offsets within its own byte buffer only.
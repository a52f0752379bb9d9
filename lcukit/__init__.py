"""Ring buffers, message queues, a buddy memory pool, string helpers and allocation tracking."""

__version__ = "0.1.0"

__all__ = [
    "allocator",
    "autocover",
    "fixedqueue",
    "mplite",
    "msghandler",
    "msgqueue",
    "ringbuf",
    "ringbuffer",
    "stringbuilder",
    "strparams",
    "textutil",
    "tracker",
    "urlcodec",
]
"""Networking building blocks: hashing, addresses, bounded containers, event handlers and logging."""

__version__ = "0.1.0"

__all__ = [
    "address",
    "daemon",
    "event",
    "event_handlers",
    "fixed_list",
    "fixed_pool",
    "hash32",
    "linked_list",
    "log",
    "murmurhash",
]
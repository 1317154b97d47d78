"""
kvcache — Cache Backends

Exports available cache adapter implementations.

The Redis adapter is lazy-loaded via registry.py to avoid a hard dependency.
"""

from .memory import MemoryCache

__all__ = [
    "MemoryCache",
]

"""
Indexing Package for Content Search

Turns the remote content tree into the flat record cache the search engine reads.

Package Structure:
- flattener.py: Pre-order flattening of the remote tree
- cache.py: Record cache with atomic snapshot swaps
"""

from .cache import ContentCache
from .flattener import flatten

__all__ = ["ContentCache", "flatten"]

"""Data source plumbing: board cache and the slate provider interface."""
from .cache import TTLCache
from .provider import SlateProvider

__all__ = ["TTLCache", "SlateProvider"]

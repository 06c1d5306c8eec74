"""Raw input loading and emulation defaults."""

from .loaders import ContextLoader, InputLoader, ContextFormatError

__all__ = ["ContextLoader", "InputLoader", "ContextFormatError"]

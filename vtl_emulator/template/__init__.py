"""Path evaluation, $util functions and rendering hooks."""

from .engine import JSONPathEngine
from .functions import UtilFunctions, compact_json, to_text
from .hooks import RenderHooks

__all__ = [
    "JSONPathEngine",
    "UtilFunctions",
    "RenderHooks",
    "compact_json",
    "to_text",
]

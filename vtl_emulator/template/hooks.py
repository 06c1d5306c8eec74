"""
Reference-insertion hooks applied when the evaluator substitutes a value.

API Gateway renders a null reference as nothing at all, a boolean as
lowercase `true`/`false` and a map or list reference as JSON. Evaluators call
these hooks at substitution time to get the same output.
"""

from typing import Any, Callable

from .functions import compact_json, is_structured


class RenderHooks:
    """The substitution hooks, sharing one injected serializer."""

    def __init__(self, serializer: Callable[[Any], str] = compact_json):
        self.serializer = serializer

    @staticmethod
    def null_to_empty(value: Any) -> Any:
        """Render None as the empty string; other values pass through."""
        return "" if value is None else value

    @staticmethod
    def boolean_to_text(value: Any) -> Any:
        """Render booleans in their JSON form; other values pass through."""
        if isinstance(value, bool):
            return "true" if value else "false"
        return value

    def serialize_if_structured(self, value: Any) -> Any:
        """Render objects and arrays as JSON text; other values pass through."""
        if is_structured(value):
            return self.serializer(value)
        return value

    def render(self, value: Any) -> Any:
        """Apply the hooks, in the order the gateway does."""
        return self.serialize_if_structured(self.boolean_to_text(self.null_to_empty(value)))

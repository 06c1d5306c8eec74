"""
Loaders for the raw strings handed to the template processor.

Handles parsing of the context JSON (strict) and the request body (lenient).
"""

import json
from typing import Any, Dict


class ContextFormatError(ValueError):
    """Raised when the context JSON is not a JSON object."""


class ContextLoader:
    """Loads the context JSON that describes the emulated request."""

    def load(self, context_json: str) -> Dict[str, Any]:
        """
        Parse the context JSON into a dict.

        Args:
            context_json: JSON text; must encode an object

        Returns:
            Parsed context map

        Raises:
            ContextFormatError: If the text is valid JSON but not an object
            json.JSONDecodeError: If the text is not valid JSON
        """
        if context_json is None or not context_json.strip():
            return {}

        context = json.loads(context_json)
        if not isinstance(context, dict):
            raise ContextFormatError(
                f"Context must be a JSON object, got {type(context).__name__}"
            )
        return context


class InputLoader:
    """Loads the request body used by the $input namespace."""

    def load(self, body: str) -> Dict[str, Any]:
        """
        Parse the body as a JSON object.

        Anything else (invalid JSON, arrays, scalars, empty text) loads as an
        empty object; the raw text stays available through $input.body.
        """
        if not body:
            return {}
        try:
            data = json.loads(body)
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

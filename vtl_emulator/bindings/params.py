"""
Method request parameters for $input.params().

Parameters arrive grouped as {"path": {...}, "querystring": {...},
"header": {...}}. A single-name lookup searches the groups in that fixed
order, whichever group actually holds the name.
"""

from typing import Any, Dict, Optional

from ..template.functions import to_text

PARAMETER_GROUPS = ("path", "querystring", "header")


class ParameterResolver:
    """Resolves request parameters across the path, querystring and header groups."""

    def __init__(self, params: Any = None):
        source = params if isinstance(params, dict) else {}
        self.groups: Dict[str, Dict[str, str]] = {}
        for group in PARAMETER_GROUPS:
            values = source.get(group)
            if not isinstance(values, dict):
                values = {}
            self.groups[group] = {
                str(name): to_text(value)
                for name, value in values.items()
                if value is not None
            }

    def all(self) -> Dict[str, Dict[str, str]]:
        """Return a copy of all three groups."""
        return {group: dict(values) for group, values in self.groups.items()}

    def get(self, name: str) -> Optional[str]:
        """
        Look up a parameter by name.

        Searches path, then querystring, then header. Header names also
        match case-insensitively when no exact match exists.

        Returns:
            The first matching value, or None
        """
        if name is None:
            return None
        for group in PARAMETER_GROUPS:
            values = self.groups[group]
            if name in values:
                return values[name]

        lowered = name.lower()
        for header, value in self.groups["header"].items():
            if header.lower() == lowered:
                return value
        return None

"""
JSONPath evaluation for the $input namespace.

Implements the dot/bracket subset of JSONPath that API Gateway accepts in
$input.path() and $input.json(): field names, array indices in brackets and
purely numeric dot segments that index into arrays. Wildcards, filters and
slices are not supported.
"""

import re
from typing import Any, List, Optional, Union

Segment = Union[str, int]

# A segment with one or more trailing bracket indices, e.g. "items[0]" or "grid[1][2]"
_BRACKETED = re.compile(r"^([^\[\]]*)((?:\[[^\[\]]*\])+)$")
_BRACKET_CONTENT = re.compile(r"\[([^\[\]]*)\]")


def _is_index(text: str) -> bool:
    return text.isascii() and text.isdigit()


class JSONPathEngine:
    """Resolves simplified JSONPath expressions against parsed JSON data."""

    @staticmethod
    def parse_path(expression: str) -> Optional[List[Segment]]:
        """
        Split a path expression into segments.

        Field names stay strings, bracket indices become ints. A purely
        numeric dot segment stays a string and only acts as an index when it
        meets an array.

        Args:
            expression: Path such as "$.user.hobbies[0]" or "user.address.city"

        Returns:
            List of segments, or None if a bracket index is malformed

        Examples:
            "$.a.b[0].c" -> ["a", "b", 0, "c"]
            "$.arr.0" -> ["arr", "0"]
            "$" -> []
            "$.a[x]" -> None
        """
        if expression.startswith("$"):
            expression = expression[1:]

        segments: List[Segment] = []
        for part in expression.split("."):
            if part == "":
                continue

            match = _BRACKETED.match(part)
            if not match:
                segments.append(part)
                continue

            name, brackets = match.groups()
            if name:
                segments.append(name)
            for content in _BRACKET_CONTENT.findall(brackets):
                content = content.strip()
                if not _is_index(content):
                    return None
                segments.append(int(content))

        return segments

    @staticmethod
    def step(current: Any, segment: Segment) -> Any:
        """Take one navigation step, returning None when it cannot be taken."""
        if isinstance(segment, int):
            if isinstance(current, list) and 0 <= segment < len(current):
                return current[segment]
            return None

        if isinstance(current, dict):
            return current.get(segment)
        if isinstance(current, list) and _is_index(segment):
            index = int(segment)
            return current[index] if index < len(current) else None
        return None

    @classmethod
    def evaluate(cls, expression: str, data: Any) -> Any:
        """
        Evaluate a path expression against data.

        Never raises: a missing field, an out-of-range or negative index,
        indexing a non-array, reading a field off a scalar and a malformed
        bracket all resolve to None.

        Args:
            expression: Path expression ("$" alone selects the whole document)
            data: Parsed JSON data

        Returns:
            The value at the path, or None
        """
        segments = cls.parse_path(expression)
        if segments is None:
            return None

        current = data
        for segment in segments:
            current = cls.step(current, segment)
            if current is None:
                return None
        return current

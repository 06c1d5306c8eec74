"""
The $input namespace.

Gives templates access to the request payload, both as native values via
path() and as JSON text via json(), plus the raw body and the request
parameters.
"""

from typing import Any, Dict, Optional

from ..template.engine import JSONPathEngine
from ..template.functions import compact_json, to_text
from .params import ParameterResolver


class InputFunctions:
    """Implements $input over one parsed request."""

    def __init__(
        self,
        data: Dict[str, Any],
        raw_body: str,
        params: ParameterResolver,
        headers: Optional[Dict[str, Any]] = None,
        jsonpath: Optional[JSONPathEngine] = None
    ):
        self.data = data
        self.raw_body = raw_body
        self.parameters = params
        self.header_map = headers if isinstance(headers, dict) else {}
        self.jsonpath = jsonpath or JSONPathEngine()

    def path(self, expression: Optional[str]) -> Any:
        """
        $input.path(x): the value at a path, keeping its native type.

        Returns None for an empty or null expression and for any path that
        does not resolve.
        """
        if not expression:
            return None
        return self.jsonpath.evaluate(str(expression), self.data)

    def json(self, expression: Optional[str] = None) -> str:
        """
        $input.json(x): the value at a path as compact JSON text.

        An empty expression, like "$", selects the whole payload. A path
        that does not resolve gives the text "null".
        """
        if not expression:
            expression = "$"
        value = self.jsonpath.evaluate(str(expression), self.data)
        if value is None:
            return "null"
        return compact_json(value)

    @property
    def body(self) -> str:
        """$input.body: the raw payload, exactly as received."""
        return self.raw_body

    def getBody(self) -> str:
        return self.raw_body

    def params(self, name: Optional[str] = None) -> Any:
        """
        $input.params() / $input.params(name).

        Without a name, returns all parameter groups. With a name, returns
        the first match from path, querystring or header (in that order).
        """
        if name is None:
            return self.parameters.all()
        return self.parameters.get(str(name))

    def headers(self, name: str) -> Optional[str]:
        """Look up a request header, matching names case-insensitively."""
        if name in self.header_map:
            value = self.header_map[name]
            return None if value is None else to_text(value)

        lowered = str(name).lower()
        for header, value in self.header_map.items():
            if str(header).lower() == lowered and value is not None:
                return to_text(value)
        return None

    def size(self) -> int:
        """Number of top-level entries in the payload."""
        return len(self.data)

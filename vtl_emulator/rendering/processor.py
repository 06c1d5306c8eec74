"""
Mapping template processing.

Builds the $input, $context and $util namespaces for one request, renders
the template through an evaluator and normalizes the result the way API
Gateway does: output that parses as JSON comes back as compact JSON,
anything else comes back verbatim.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional

from ..bindings import InputFunctions, ParameterResolver, build_context
from ..config import ContextLoader, InputLoader
from ..template import JSONPathEngine, RenderHooks, UtilFunctions, compact_json
from .evaluator import AirspeedEvaluator, Evaluator

LOG = logging.getLogger(__name__)

ERROR_PREFIX = "Error processing template: "

# Namespace entries that context keys of the same name may not replace
RESERVED_NAMES = ("input", "context", "util")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def normalize_output(output: str, serializer: Callable[[Any], str] = compact_json) -> str:
    """
    Re-serialize rendered output that is valid JSON.

    Args:
        output: Text produced by the evaluator
        serializer: Function producing the canonical JSON text

    Returns:
        Compact JSON if the output parses, otherwise the output unchanged

    Examples:
        '{ "a" : 1 }' -> '{"a":1}'
        '{"a":1,}' -> '{"a":1,}'
        'Hello' -> 'Hello'
    """
    try:
        value = json.loads(output, parse_constant=_reject_constant)
    except ValueError:
        return output
    return serializer(value)


class VTLProcessor:
    """Renders API Gateway mapping templates against an emulated request."""

    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        serializer: Callable[[Any], str] = compact_json
    ):
        self.evaluator = evaluator or AirspeedEvaluator()
        self.serializer = serializer
        self.hooks = RenderHooks(serializer)
        self.context_loader = ContextLoader()
        self.input_loader = InputLoader()
        self.jsonpath = JSONPathEngine()
        self.util = UtilFunctions()

    def build_namespace(
        self,
        context: Dict[str, Any],
        data: Dict[str, Any],
        raw_body: str
    ) -> Dict[str, Any]:
        """
        Assemble the variables visible to the template.

        Top-level context keys are exposed as variables of their own
        (e.g. $stageVariables), $body holds the raw payload, and the three
        gateway namespaces are bound last so they cannot be shadowed.

        Args:
            context: Parsed context JSON
            data: Parsed payload ({} if the body was not a JSON object)
            raw_body: Payload text as received

        Returns:
            Fresh namespace dict for a single evaluation
        """
        namespace = {
            name: value for name, value in context.items()
            if name not in RESERVED_NAMES
        }
        namespace["body"] = raw_body
        namespace["input"] = InputFunctions(
            data,
            raw_body,
            ParameterResolver(context.get("params")),
            context.get("headers"),
            self.jsonpath
        )
        namespace["context"] = build_context(context)
        namespace["util"] = self.util
        return namespace

    def process(self, template: str, input_body: str = "", context_json: str = "{}") -> str:
        """
        Render a mapping template.

        Never raises: any failure (invalid context JSON, template syntax
        errors, evaluation errors) is returned as a single line starting
        with "Error processing template: ".

        Args:
            template: VTL mapping template
            input_body: Request payload, JSON or not
            context_json: JSON object describing the request context

        Returns:
            Rendered and normalized output
        """
        try:
            raw_body = input_body or ""
            context = self.context_loader.load(context_json)
            data = self.input_loader.load(raw_body)
            namespace = self.build_namespace(context, data, raw_body)
            output = self.evaluator.render(template, namespace, self.hooks)
            return normalize_output(output, self.serializer)
        except Exception as e:
            LOG.debug("Failed to process template", exc_info=True)
            return f"{ERROR_PREFIX}{e}"

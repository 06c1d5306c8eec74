"""The $input and $context namespaces bound into each template evaluation."""

from .context import ContextModel, build_context
from .input import InputFunctions
from .params import ParameterResolver

__all__ = [
    "ContextModel",
    "build_context",
    "InputFunctions",
    "ParameterResolver",
]

"""
Template evaluation backends.

The template language itself (#if, #foreach, #set, ...) is handled by an
existing Velocity engine. An evaluator only has to render a template against
a namespace and call the reference-insertion hooks whenever a value is
substituted into the output.
"""

import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, Protocol

import airspeed

from ..template.hooks import RenderHooks


class Evaluator(Protocol):
    """Renders a template against a namespace, applying the hooks on substitution."""

    def render(self, template: str, namespace: Dict[str, Any], hooks: RenderHooks) -> str:
        ...


# A reference that is not already quiet ($!x). The parameter list of a
# #macro header and the targets of #set/#foreach are captured so they can be
# left alone.
_REFERENCE = re.compile(
    r"(?P<keep>#\{?macro\}?\s*\([^)]*\)|#\{?(?:set|foreach)\}?\s*\(\s*\$)"
    r"|(?<!\\)\$(?!!)(?=\{?[A-Za-z_])"
)


def quiet_references(template: str) -> str:
    """
    Rewrite every reference to its quiet form so null renders as nothing.

    Examples:
        '{"a": "$input.path('$.a')"}' -> '{"a": "$!input.path('$.a')"}'
        '#set($x = $y)' -> '#set($x = $!y)'
        '${name}' -> '$!{name}'
        '#macro(greet $who)hi $who#end' -> '#macro(greet $who)hi $!who#end'
    """
    def replace(match: "re.Match[str]") -> str:
        if match.group("keep"):
            return match.group(0)
        return "$!"

    return _REFERENCE.sub(replace, template)


class _JsonObject(dict):
    """A JSON object as the engine sees it: rendered through the hooks, with Velocity map helpers."""

    _HELPERS = frozenset(("size", "isEmpty", "keySet", "containsKey", "put", "putAll"))

    def __init__(self, items: Iterable, hooks: RenderHooks):
        super().__init__(items)
        self._hooks = hooks

    def __getattribute__(self, name: str) -> Any:
        # A payload key shadows the helper of the same name
        if name in _JsonObject._HELPERS and dict.__contains__(self, name):
            raise AttributeError(name)
        return super().__getattribute__(name)

    def __str__(self) -> str:
        return self._hooks.render(_unbind(self))

    def size(self) -> int:
        return len(self)

    def isEmpty(self) -> bool:
        return len(self) == 0

    def keySet(self) -> list:
        return list(self.keys())

    def containsKey(self, key: Any) -> bool:
        return key in self

    def put(self, key: Any, value: Any) -> Any:
        previous = self.get(key)
        self[key] = value
        return previous

    def putAll(self, other: Mapping) -> None:
        self.update(other)


class _JsonArray(list):
    """A JSON array as the engine sees it: rendered through the hooks, with Velocity list helpers."""

    def __init__(self, items: Iterable, hooks: RenderHooks):
        super().__init__(items)
        self._hooks = hooks

    def __str__(self) -> str:
        return self._hooks.render(_unbind(self))

    def size(self) -> int:
        return len(self)

    def isEmpty(self) -> bool:
        return len(self) == 0

    def get(self, index: int) -> Any:
        return self[index]

    def contains(self, item: Any) -> bool:
        return item in self

    def add(self, item: Any) -> bool:
        self.append(item)
        return True


class _JsonBoolean:
    """A JSON boolean as the engine sees it: truthy like a bool, rendered through the hooks."""

    __slots__ = ("value", "_hooks")

    def __init__(self, value: bool, hooks: RenderHooks):
        self.value = value
        self._hooks = hooks

    def __bool__(self) -> bool:
        return self.value

    def __eq__(self, other: Any) -> bool:
        return self.value == _unbind(other)

    def __ne__(self, other: Any) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self._hooks.render(self.value)


class _Reference:
    """Engine-facing view of a binding object; everything read through it is bound too."""

    __slots__ = ("_target", "_hooks")

    def __init__(self, target: Any, hooks: RenderHooks):
        self._target = target
        self._hooks = hooks

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return bind(getattr(self._target, name), self._hooks)

    def __str__(self) -> str:
        return str(self._target)


def _unbind(value: Any) -> Any:
    """Turn an engine-facing value back into the plain value it wraps."""
    if isinstance(value, _Reference):
        return value._target
    if isinstance(value, _JsonBoolean):
        return value.value
    if isinstance(value, _JsonObject):
        return {key: _unbind(item) for key, item in value.items()}
    if isinstance(value, _JsonArray):
        return [_unbind(item) for item in value]
    return value


def _bind_call(function: Callable, hooks: RenderHooks) -> Callable:
    def call(*args: Any) -> Any:
        return bind(function(*[_unbind(arg) for arg in args]), hooks)
    return call


def bind(value: Any, hooks: RenderHooks) -> Any:
    """
    Prepare a value for the engine.

    Objects and arrays are copied into hook-aware containers, so the engine
    never mutates the caller's data and renders them as JSON. Booleans are
    wrapped so they print as `true`/`false`. Other objects are wrapped so
    their attributes and return values get the same treatment.
    """
    if isinstance(value, bool):
        return _JsonBoolean(value, hooks)
    if value is None or isinstance(value, (str, int, float)):
        return value
    if isinstance(value, (_JsonObject, _JsonArray, _JsonBoolean, _Reference)):
        return value
    if isinstance(value, Mapping):
        return _JsonObject(((key, bind(item, hooks)) for key, item in value.items()), hooks)
    if isinstance(value, (list, tuple)):
        return _JsonArray((bind(item, hooks) for item in value), hooks)
    if callable(value):
        return _bind_call(value, hooks)
    return _Reference(value, hooks)


class AirspeedEvaluator:
    """Evaluator backed by the airspeed Velocity engine."""

    def render(self, template: str, namespace: Dict[str, Any], hooks: RenderHooks) -> str:
        bound = {name: bind(value, hooks) for name, value in namespace.items()}
        return airspeed.Template(quiet_references(template)).merge(bound)

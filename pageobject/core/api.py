# pageobject/core/api.py
from __future__ import annotations

"""Command catalogue and namespace helpers
------------------------------------------
Which command names take an element as their first argument, which belong to
the scoped `element(...)` API, and the small objects used as command
namespaces (`assert_`, `verify`, `expect`, ...) on pages and sections.
"""

from typing import Any, Callable, Dict, Iterator, Tuple, Union


# Built-in commands whose first argument is an element (strict list).
ELEMENT_COMMANDS: Tuple[str, ...] = (
    "click",
    "double_click",
    "right_click",
    "clear_value",
    "set_value",
    "send_keys",
    "update_value",
    "upload_file",
    "get_text",
    "get_value",
    "get_attribute",
    "get_css_property",
    "get_tag_name",
    "get_location",
    "get_element_size",
    "is_visible",
    "is_present",
    "is_enabled",
    "is_selected",
    "move_to_element",
    "drag_and_drop",
    "submit_form",
    "check",
    "uncheck",
    "wait_for_element_visible",
    "wait_for_element_not_visible",
    "wait_for_element_present",
    "wait_for_element_not_present",
)

# Assertions (assert_/verify namespaces) whose first argument is an element.
ELEMENT_ASSERTIONS: Tuple[str, ...] = (
    "visible",
    "not_visible",
    "element_present",
    "element_not_present",
    "text_contains",
    "text_equals",
    "value_equals",
    "value_contains",
    "attribute_equals",
    "attribute_contains",
    "css_class_present",
    "css_property",
    "enabled",
    "selected",
)

# Element-accepting entry points of `expect` and of the page object itself.
ELEMENT_ENTRY_POINTS: Tuple[str, ...] = ("element", "elements", "section", "within")

# Scoped element API; inner tuples are aliases of one command.
SCOPED_ELEMENT_COMMANDS: Tuple[Union[str, Tuple[str, ...]], ...] = (
    ("find", "find_element"),
    ("find_all", "find_elements"),
    "get_by_text",
    "get_by_role",
    "get_by_placeholder",
    "get_by_label_text",
    "get_by_alt_text",
    "get_by_test_id",
)


def _flatten(names) -> Iterator[str]:
    for entry in names:
        if isinstance(entry, (tuple, list)):
            yield from entry
        else:
            yield entry


_SCOPED_NAMES = frozenset(_flatten(SCOPED_ELEMENT_COMMANDS))
_ELEMENT_NAMES = frozenset(ELEMENT_COMMANDS + ELEMENT_ASSERTIONS + ELEMENT_ENTRY_POINTS)


def is_element_command(command_name: str) -> bool:
    return command_name in _ELEMENT_NAMES


def is_scoped_element_command(command_name: str) -> bool:
    return command_name in _SCOPED_NAMES


def get_element_commands_strict() -> Tuple[str, ...]:
    return ELEMENT_COMMANDS


# ---------- Namespaces ----------

ALLOWED_NAMESPACES: Tuple[str, ...] = ("alerts", "cookies", "document", "assert", "verify", "expect")

# `assert` is a keyword, so that namespace lives under `assert_`
_NAMESPACE_ATTRIBUTES: Dict[str, str] = {"assert": "assert_"}


def is_allowed_namespace(command_name: str) -> bool:
    return command_name in ALLOWED_NAMESPACES


def namespace_attribute(namespace: str) -> str:
    return _NAMESPACE_ATTRIBUTES.get(namespace, namespace)


class CommandNamespace:
    """Attribute bag holding wrapped commands, e.g. `page.assert_.url_matches`."""

    def __init__(self, name: str) -> None:
        self._name = name

    def __contains__(self, command_name: str) -> bool:
        return command_name in self.__dict__ and not command_name.startswith("_")

    def __iter__(self) -> Iterator[str]:
        return (k for k in self.__dict__ if not k.startswith("_"))

    def __repr__(self) -> str:
        return f"<CommandNamespace {self._name}: {', '.join(self)}>"


class _NegatedNamespace:
    def __init__(self, namespace: CommandNamespace) -> None:
        self._namespace = namespace

    def __getattr__(self, command_name: str) -> Callable[..., Any]:
        if command_name.startswith("_"):
            raise AttributeError(command_name)
        command = getattr(self._namespace, command_name)

        def negated(*args: Any) -> Any:
            return command({"negate": True, "args": list(args)})

        negated.__name__ = command_name
        return negated


class AssertProxy:
    """
    Wraps an `assert_`/`verify` namespace so assertions can be negated:

        page.assert_.not_.url_matches(r"^http:")

    Negated calls forward a single structured argument
    `{"negate": True, "args": [...]}`.
    """

    def __init__(self, namespace: CommandNamespace) -> None:
        self._namespace = namespace

    @property
    def namespace(self) -> CommandNamespace:
        return self._namespace

    @property
    def not_(self) -> _NegatedNamespace:
        return _NegatedNamespace(self._namespace)

    def __getattr__(self, command_name: str) -> Any:
        if command_name.startswith("_"):
            raise AttributeError(command_name)
        return getattr(self._namespace, command_name)

    def __contains__(self, command_name: str) -> bool:
        return command_name in self._namespace

    def __repr__(self) -> str:
        return f"<AssertProxy {self._namespace!r}>"


def make_assert_proxy(namespace: Any) -> AssertProxy:
    if isinstance(namespace, AssertProxy):
        return namespace
    return AssertProxy(namespace)

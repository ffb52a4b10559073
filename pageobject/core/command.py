# pageobject/core/command.py
from __future__ import annotations

"""Command wrapper
------------------
Wraps every command and assertion exposed on a page or section. On each call
the first argument is checked for an element reference, `@name` references
are resolved against the owner's declared elements/sections (building a
recursion chain for nested sections), the real function runs, and the return
value is turned into something the caller can keep chaining on.
"""

import asyncio
import functools
import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from pageobject.core import api
from pageobject.core.element import Element, LocateStrategy
from pageobject.core.errors import ElementLookupError
from pageobject.selectors.reference import parse_reference
from pageobject.utils.logger import get_logger, log_with_context

log = get_logger(__name__)

__all__ = ["Command", "CallContext", "ParseResult", "ChainableResult", "WithinScope"]


@dataclass(frozen=True)
class CallContext:
    """
    Per-call execution context. `needs_recursion` and `element` are set only
    for calls made through a `within(...)` scope.
    """
    client: Any = None
    needs_recursion: bool = False
    element: Optional[Element] = None


@dataclass
class ParseResult:
    element: Optional[Element] = None
    # scoped element API only: resolve the enclosing sections recursively, then
    # let the original accessor find the final element from the original args
    only_locate_sections_recursively: bool = False


class ChainableResult:
    """
    Awaitable result of a command that also exposes the owning page's commands.

        await page.click("@submit")                       # the click's value
        await page.click("@submit").set_value("@q", "x")  # keeps chaining

    The wrapped awaitable is scheduled as soon as it is created when an event
    loop is running, otherwise on first await. It can be awaited any number
    of times and always yields the same value.

    A command called on a ChainableResult is linked to it. Awaiting the last
    link awaits every earlier one first, so an earlier failure is raised to
    the caller and later links are discarded.
    """

    _internal = ("_awaitable", "_owner", "_future", "_previous")

    def __init__(self, awaitable: Any, owner: Any) -> None:
        self._awaitable = awaitable
        self._owner = owner
        self._future: Optional[asyncio.Future] = None
        self._previous: Optional[ChainableResult] = None
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self._future = asyncio.ensure_future(awaitable)

    @property
    def owner(self) -> Any:
        return self._owner

    @property
    def previous(self) -> Optional["ChainableResult"]:
        return self._previous

    def __await__(self):
        return self._resolve().__await__()

    async def _resolve(self) -> Any:
        if self._previous is not None:
            try:
                await self._previous
            except BaseException:
                self._discard()
                raise
        if self._future is None:
            self._future = asyncio.ensure_future(self._awaitable)
        return await self._future

    def _discard(self) -> None:
        if self._future is None:
            if inspect.iscoroutine(self._awaitable):
                self._awaitable.close()
            return
        # keeps a later failure from being reported as never retrieved
        self._future.add_done_callback(_consume_outcome)

    def _link(self, attr: Any) -> Any:
        if isinstance(attr, (api.CommandNamespace, api.AssertProxy)):
            return _ChainedNamespace(attr, self)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def chained(*args: Any, **kwargs: Any) -> Any:
            result = attr(*args, **kwargs)
            if isinstance(result, ChainableResult) and result is not self and result._previous is None:
                result._previous = self
            return result

        return chained

    def __getattr__(self, name: str) -> Any:
        if name in ChainableResult._internal:
            raise AttributeError(name)
        return self._link(getattr(self._owner, name))

    def __repr__(self) -> str:
        return f"<ChainableResult of {self._owner!r}>"


class _ChainedNamespace:
    """`result.assert_.url_matches(...)`: namespace commands linked to `result`."""

    def __init__(self, namespace: Any, chain: ChainableResult) -> None:
        self._namespace = namespace
        self._chain = chain

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attr = getattr(self._namespace, name)
        if name == "not_":
            return _ChainedNamespace(attr, self._chain)
        return self._chain._link(attr)


def _consume_outcome(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()


class Command:
    TYPE_ELEMENT = "element"
    TYPE_SECTION = "section"

    @staticmethod
    def is_possible_element_selector(item: Any, command_name: str = "") -> bool:
        if not item:
            return False

        if isinstance(item, (list, tuple)):
            return False

        if isinstance(item, str):
            return (
                item.startswith("@")
                or api.is_element_command(command_name)
                or api.is_scoped_element_command(command_name)
            )

        if isinstance(item, Mapping):
            return isinstance(item.get("selector"), str)

        return isinstance(getattr(item, "selector", None), str)

    @staticmethod
    def is_user_defined_element_command(command_name: str) -> bool:
        return command_name not in api.get_element_commands_strict()

    def __init__(self, parent: Any, command_name: str, is_chai_assertion: bool = False, is_async: bool = False):
        self.parent = parent
        self.command_name = command_name
        self.is_chai_assertion = is_chai_assertion
        self.is_async = is_async
        self.is_user_defined = Command.is_user_defined_element_command(command_name)

    def __repr__(self) -> str:
        return f"<Command {self.command_name} on {getattr(self.parent, 'name', self.parent)!r}>"

    # ---------- Wrapping ----------

    def create_wrapper(self, command_fn: Callable[..., Any]) -> Callable[..., Any]:
        """
        Build the callable exposed on the page/section for `command_fn`.

        For element commands the first argument is resolved to an Element
        (nested section elements get a `recursion` chain of their ancestors);
        everything else is passed through untouched. The wrapper returns:
          - the raw result for `expect` assertions,
          - a ChainableResult when the result is awaitable and the owner is a
            Page or the client runs an async test case,
          - the owner otherwise, for fluent chaining.
        """
        command = self

        @functools.wraps(command_fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return command.invoke(command_fn, args, kwargs, CallContext())

        def call_with(context: CallContext, *args: Any, **kwargs: Any) -> Any:
            return command.invoke(command_fn, args, kwargs, context)

        wrapper.command = command
        wrapper.call_with = call_with
        return wrapper

    def invoke(self, command_fn: Callable[..., Any], args: Tuple[Any, ...], kwargs: Dict[str, Any], context: CallContext) -> Any:
        args = list(args)

        scoped = bool(args) and context.needs_recursion
        if scoped:
            # the container chain already carries the owner's sections
            self.parse_element_selector(args, within_container=True)
            input_element = Element.create_from_selector(args[0])
            if self.is_user_defined:
                input_element.container = context.element
                args[0] = input_element
            else:
                args[0] = Element.recursive([context.element, input_element])

        client = context.client if context.client is not None else getattr(self.parent, "client", None)
        result = self.execute_command(command_fn, args, client, kwargs, resolve=not scoped)

        if self.is_chai_assertion:
            return result

        is_async_testcase = bool(getattr(client, "is_async_testcase", False))
        if inspect.isawaitable(result) and (self._owner_is_page() or is_async_testcase):
            return ChainableResult(result, self.parent)

        return self.parent

    def _owner_is_page(self) -> bool:
        from pageobject.core.page import Page

        return isinstance(self.parent, Page)

    def execute_command(
        self,
        command_fn: Callable[..., Any],
        args: List[Any],
        context: Any,
        kwargs: Optional[Dict[str, Any]] = None,
        resolve: bool = True,
    ) -> Any:
        """
        Resolve element selectors, then call `command_fn(context, *args)`.

        A single structured argument `{"args": [...]}` (negated assertions) is
        resolved in place and forwarded as is. `resolve=False` is used for
        `within(...)` calls, whose first argument is already scoped.
        """
        if resolve:
            first = args[0] if args else None
            if isinstance(first, Mapping) and isinstance(first.get("args"), list):
                parse_args = first["args"]
            else:
                parse_args = args

            self.parse_element_selector(parse_args)

        log_with_context(log, command=self.command_name).debug(
            f"{self.command_name}({', '.join(repr(a) for a in args)})"
        )
        return command_fn(context, *args, **(kwargs or {}))

    # ---------- Lookup ----------

    def validate(self, name: str, strategy: Optional[str], kind: str) -> None:
        if kind == Command.TYPE_SECTION:
            target = self.parent.section
        else:
            target = self.parent.elements

        is_valid = name in target
        if is_valid and strategy:
            declared = target[name].locate_strategy
            is_valid = declared is not None and declared == strategy

        if not is_valid:
            available = list(target)
            if strategy:
                available = [
                    f"{item}[locateStrategy='{_strategy_text(target[item].locate_strategy)}']" for item in available
                ]
            err = ElementLookupError(
                name,
                owner=getattr(self.parent, "name", repr(self.parent)),
                kind=kind,
                available=available,
                strategy=_strategy_text(strategy) if strategy else None,
            )
            log.debug(str(err))
            raise err

    def get_element(self, element_name: str, strategy: Optional[str] = None) -> Element:
        self.validate(element_name, strategy, Command.TYPE_ELEMENT)
        return self.parent.elements[element_name]

    def get_section(self, section_name: str, strategy: Optional[str] = None) -> Any:
        self.validate(section_name, strategy, Command.TYPE_SECTION)
        return self.parent.section[section_name]

    # ---------- Resolution ----------

    def get_selector_from_args(self, args: List[Any]) -> Tuple[Any, int]:
        """Return (selector, number of arguments it spans); (None, 0) if none."""
        if not args:
            return None, 0

        selector_arg = args[0]
        if not Command.is_possible_element_selector(selector_arg, self.command_name):
            return None, 0

        # ("xpath", "//a") style: strategy and selector as two arguments
        if isinstance(selector_arg, str) and LocateStrategy.is_valid(selector_arg) \
                and len(args) > 1 and isinstance(args[1], str):
            return {"selector": args[1], "locate_strategy": selector_arg}, 2

        return selector_arg, 1

    def parse_element_selector(self, args: List[Any], within_container: bool = False) -> ParseResult:
        """
        Replace an element reference in `args[0]` with its resolved Element.

        `@name[:pseudo]` is looked up among the owner's elements (or sections,
        for `expect.section`). A plain selector used on a section is scoped to
        that section through a recursion chain. Plain selectors on a page are
        left untouched.

        With `within_container=True` no section chain is built: the element is
        located inside a container whose own chain already starts at the
        owner's sections.
        """
        selector, span = self.get_selector_from_args(args)
        if selector is None:
            return ParseResult()

        input_element = Element.create_from_selector(selector)
        result = ParseResult()

        if input_element.has_element_selector():
            reference = parse_reference(input_element.selector)

            # eg: page.expect.section("@footer")
            is_section_selector = self.is_chai_assertion and self.command_name == Command.TYPE_SECTION
            getter = self.get_section if is_section_selector else self.get_element

            declared = getter(reference.name, input_element.locate_strategy)

            Element.copy_defaults(input_element, declared)
            input_element.pseudo_selector = reference.pseudo_selector
            input_element.locate_strategy = declared.locate_strategy
            input_element.selector = declared.selector
            if not within_container:
                input_element = input_element.get_recursive_lookup_element() or input_element
            log.debug(f"{self.command_name}: resolved @{reference.name} -> {input_element}")
        else:
            from pageobject.core.page import Section

            if within_container or not isinstance(self.parent, Section):
                return ParseResult()

            input_element.parent = self.parent
            input_element = input_element.get_recursive_lookup_element() or Element.recursive(
                [self.parent, input_element]
            )
            if api.is_scoped_element_command(self.command_name):
                result.only_locate_sections_recursively = True

        args[0:span] = [input_element]
        result.element = input_element
        return result


class WithinScope:
    """
    Commands of `owner` run relative to a container element:

        page.within("@form").click("@submit")

    Built-in element commands receive `recursion` chains of
    `[container, element]`; user-defined commands receive the element with
    its `container` set.
    """

    def __init__(self, owner: Any, target: Any, element: Element) -> None:
        self._owner = owner
        self._target = target
        self.element = element

    @classmethod
    def create(cls, owner: Any, selector: Any) -> "WithinScope":
        args = [selector]
        Command(owner, "within").parse_element_selector(args)
        return cls(owner, owner, Element.create_from_selector(args[0]))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attr = getattr(self._target, name)

        call_with = getattr(attr, "call_with", None)
        if call_with is not None:
            context = CallContext(
                client=getattr(self._owner, "client", None),
                needs_recursion=True,
                element=self.element,
            )
            return functools.partial(call_with, context)

        if isinstance(attr, (api.CommandNamespace, api.AssertProxy)):
            return WithinScope(self._owner, attr, self.element)
        return attr

    def __repr__(self) -> str:
        return f"<WithinScope {self.element} of {self._owner!r}>"


def _strategy_text(strategy: Any) -> str:
    if strategy is None:
        return "null"
    if isinstance(strategy, LocateStrategy):
        return strategy.value
    return str(strategy)

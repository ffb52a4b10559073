# pageobject/core/page.py
from __future__ import annotations

"""Pages and sections
---------------------
The owners of declared elements and commands. Both are built from
declarations (plain mappings or the pydantic models in `declarations`) and
receive their commands through `CommandLoader.add_wrapped_commands`.
"""

import weakref
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional, Union

from pageobject.core import api
from pageobject.core.command import WithinScope
from pageobject.core.declarations import (
    PageDeclaration,
    SectionDeclaration,
    parse_element_declarations,
    parse_page_declaration,
    parse_section_declaration,
)
from pageobject.core.element import Element, LocateStrategy
from pageobject.core.loader import CommandLoader, CommandLoaderFn, commands_from_mapping
from pageobject.utils.logger import get_logger

log = get_logger(__name__)

CommandSource = Union[CommandLoaderFn, Mapping]

__all__ = ["BaseObject", "Page", "Section"]


def _as_loader(source: CommandSource) -> CommandLoaderFn:
    if isinstance(source, Mapping):
        return commands_from_mapping(dict(source))
    return source


class BaseObject:
    """Shared construction for pages and sections."""

    def __init__(
        self,
        name: str,
        *,
        elements: Any = None,
        sections: Optional[Mapping[str, Any]] = None,
        commands: Iterable[CommandSource] = (),
        parent: Optional["BaseObject"] = None,
        element_api: Any = None,
    ) -> None:
        self.name = name
        self._parent_ref = weakref.ref(parent) if parent is not None else None

        self.elements: Dict[str, Element] = {}
        for element_name, declaration in parse_element_declarations(elements, source=name).items():
            element = Element.create_from_selector(declaration)
            element.name = element_name
            element.parent = self
            self.elements[element_name] = element

        self.section: Dict[str, Section] = {}
        for section_name, definition in (sections or {}).items():
            self.section[section_name] = Section.from_definition(section_name, definition, parent=self)

        client = self.client
        builtin_loaders = getattr(client, "command_loaders", None)
        if callable(builtin_loaders):
            for loader in builtin_loaders():
                CommandLoader.add_wrapped_commands(self, loader)

        for source in commands:
            CommandLoader.add_wrapped_commands(self, _as_loader(source))

        if element_api is None and callable(getattr(client, "create_element_api", None)):
            element_api = client.create_element_api()
        if element_api is not None:
            CommandLoader.wrap_scoped_element_api(self, element_api, api.SCOPED_ELEMENT_COMMANDS)
            self.element = element_api.element

        log.debug(
            f"{type(self).__name__} {name!r}: {len(self.elements)} element(s), {len(self.section)} section(s)"
        )

    @property
    def parent(self) -> Optional["BaseObject"]:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def client(self) -> Any:
        parent = self.parent
        return parent.client if parent is not None else None

    def within(self, selector: Any) -> WithinScope:
        """Run this object's commands relative to a container element."""
        return WithinScope.create(self, selector)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class Section(BaseObject):
    """A named, nested scope of a page; located inside its parent by its own selector."""

    def __init__(
        self,
        name: str,
        selector: str,
        *,
        locate_strategy: Optional[Union[LocateStrategy, str]] = None,
        parent: BaseObject,
        index: Optional[int] = None,
        timeout: Optional[int] = None,
        retry_interval: Optional[int] = None,
        abort_on_failure: Optional[bool] = None,
        suppress_not_found_errors: Optional[bool] = None,
        **kwargs: Any,
    ) -> None:
        self.selector = selector
        self.locate_strategy = LocateStrategy(locate_strategy) if locate_strategy is not None else None
        self.index = index
        self.timeout = timeout
        self.retry_interval = retry_interval
        self.abort_on_failure = abort_on_failure
        self.suppress_not_found_errors = suppress_not_found_errors
        super().__init__(name, parent=parent, **kwargs)

    @classmethod
    def from_definition(cls, name: str, definition: Any, *, parent: BaseObject) -> "Section":
        """
        `definition` is a SectionDeclaration, a selector string, or a mapping
        with the declaration keys plus an optional `commands` list of loaders.
        """
        commands: Iterable[CommandSource] = ()
        nested: Optional[Mapping[str, Any]] = None
        if isinstance(definition, Mapping):
            definition = dict(definition)
            commands = definition.pop("commands", ()) or ()
            # nested sections may carry their own `commands`, so they are built raw
            nested = definition.pop("sections", None) or definition.pop("section", None) or {}
        decl: SectionDeclaration = parse_section_declaration(definition, source=name)

        return cls(
            name,
            decl.selector,
            locate_strategy=decl.locate_strategy,
            parent=parent,
            index=decl.index,
            timeout=decl.timeout,
            retry_interval=decl.retry_interval,
            abort_on_failure=decl.abort_on_failure,
            suppress_not_found_errors=decl.suppress_not_found_errors,
            elements={k: v.model_dump(exclude_none=True) for k, v in decl.elements.items()},
            sections=nested if nested is not None else dict(decl.sections),
            commands=commands,
        )


class Page(BaseObject):
    """
    Root page object.

        page = Page(
            "LoginPage",
            client=PlaywrightClient(pw_page),
            url="https://example.com/login",
            elements={"submit": "#go"},
            sections={"footer": {"selector": "footer", "elements": {"link": "a.link"}}},
        )
        page.click("@submit")
        page.section["footer"].click("@link")
    """

    def __init__(
        self,
        name: str,
        *,
        client: Any = None,
        url: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self._client = client
        self.url = url
        super().__init__(name, **kwargs)

    @property
    def client(self) -> Any:
        return self._client

    @classmethod
    def from_declaration(
        cls,
        declaration: Union[PageDeclaration, Mapping],
        *,
        client: Any = None,
        commands: Iterable[CommandSource] = (),
        element_api: Any = None,
    ) -> "Page":
        if isinstance(declaration, Mapping):
            declaration = parse_page_declaration(dict(declaration))

        return cls(
            declaration.name,
            client=client,
            url=declaration.url,
            elements={k: v.model_dump(exclude_none=True) for k, v in declaration.elements.items()},
            sections=dict(declaration.sections),
            commands=commands,
            element_api=element_api,
        )

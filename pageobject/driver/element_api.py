# pageobject/driver/element_api.py
from __future__ import annotations

"""Scoped element API
---------------------
`page.element(...)` and its finders (`find`, `get_by_text`, ...) over
Playwright locators. Every lookup returns a `ScopedElement`, which offers the
same finders relative to itself and forwards anything else (click, fill,
inner_text, ...) to its Playwright locator.
"""

from typing import Any, Optional

from playwright.sync_api import Locator

from pageobject.core.element import Element


def _text_of(value: Any) -> str:
    if isinstance(value, Element) and isinstance(value.selector, str):
        return value.selector
    return str(value)


class _Finders:
    """Finder methods shared by the page-level accessor and scoped elements."""

    _client: Any

    @property
    def _root(self) -> Any:
        raise NotImplementedError

    def _scoped(self, locator: Locator) -> "ScopedElement":
        return ScopedElement(locator, self._client)

    def find(self, selector: Any) -> "ScopedElement":
        return self._scoped(self._client.locate(selector, root=self._root).first)

    find_element = find

    def find_all(self, selector: Any) -> "ScopedElement":
        return self._scoped(self._client.locate(selector, root=self._root))

    find_elements = find_all

    def get_by_text(self, text: Any, *, exact: bool = False) -> "ScopedElement":
        return self._scoped(self._root.get_by_text(_text_of(text), exact=exact))

    def get_by_role(self, role: Any, *, name: Optional[str] = None, exact: bool = False) -> "ScopedElement":
        kwargs = {}
        if name:
            kwargs["name"] = name
            kwargs["exact"] = exact
        return self._scoped(self._root.get_by_role(_text_of(role), **kwargs))

    def get_by_placeholder(self, text: Any, *, exact: bool = False) -> "ScopedElement":
        return self._scoped(self._root.get_by_placeholder(_text_of(text), exact=exact))

    def get_by_label_text(self, text: Any, *, exact: bool = False) -> "ScopedElement":
        return self._scoped(self._root.get_by_label(_text_of(text), exact=exact))

    def get_by_alt_text(self, text: Any, *, exact: bool = False) -> "ScopedElement":
        return self._scoped(self._root.get_by_alt_text(_text_of(text), exact=exact))

    def get_by_test_id(self, test_id: Any) -> "ScopedElement":
        return self._scoped(self._root.get_by_test_id(_text_of(test_id)))


class ScopedElement(_Finders):
    def __init__(self, locator: Locator, client: Any) -> None:
        self.locator = locator
        self._client = client

    @property
    def _root(self) -> Locator:
        return self.locator

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self.locator, name)

    def __repr__(self) -> str:
        return f"<ScopedElement {self.locator!r}>"


class ElementAccessor(_Finders):
    """The callable `element` attribute: `element(selector)` plus finders rooted at the page."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @property
    def _root(self) -> Any:
        return self._client.page

    def __call__(self, selector: Any) -> ScopedElement:
        return self._scoped(self._client.locate(selector))


class ElementApi:
    """Holder of the `element` accessor; one instance per page or section."""

    def __init__(self, client: Any) -> None:
        self.client = client
        self.element = ElementAccessor(client)

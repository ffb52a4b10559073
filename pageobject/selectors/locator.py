# pageobject/selectors/locator.py
from __future__ import annotations

from typing import Any, Optional, Union

from playwright.sync_api import Locator, Page

from pageobject.core.element import Element, LocateStrategy
from pageobject.utils.logger import get_logger

log = get_logger(__name__)


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def to_playwright_selector(strategy: LocateStrategy, value: str, pseudo_selector: Optional[str] = None) -> str:
    """
    Translate one locate strategy + selector into a Playwright selector string.

    - css selector      -> "div.item" (pseudo selector appended: "div.item:visible")
    - xpath             -> "xpath=//div"
    - link text         -> 'a:text-is("Home")'
    - partial link text -> 'a:has-text("Ho")'
    - tag name          -> "input"
    """
    if strategy == LocateStrategy.css:
        return f"{value}:{pseudo_selector}" if pseudo_selector else value

    if pseudo_selector:
        log.debug(f"pseudo selector {pseudo_selector!r} ignored for strategy '{strategy.value}'")

    if strategy == LocateStrategy.xpath:
        return f"xpath={value}"
    if strategy == LocateStrategy.link_text:
        return f"a:text-is({_quote(value)})"
    if strategy == LocateStrategy.partial_link_text:
        return f"a:has-text({_quote(value)})"
    if strategy == LocateStrategy.tag_name:
        return value

    raise ValueError(f"'{strategy.value}' cannot be translated to a single selector")


def resolve_locator(
    root: Union[Page, Locator],
    target: Any,
    *,
    default_strategy: Union[LocateStrategy, str] = LocateStrategy.css,
) -> Locator:
    """
    Convert an Element (or anything Element.create_from_selector accepts:
    plain selector strings, descriptors, sections) into a Playwright Locator.

    `recursion` chains are located scope by scope, each inside the previous
    one. An element's `container` is located first and used as its root.
    """
    element = target if isinstance(target, Element) else Element.create_from_selector(target)

    if element.container is not None:
        root = resolve_locator(root, element.container, default_strategy=default_strategy)

    if element.is_recursive:
        loc: Union[Page, Locator] = root
        for scope in element.selector:
            loc = resolve_locator(loc, scope, default_strategy=default_strategy)
        return loc  # type: ignore[return-value]

    strategy = element.locate_strategy or LocateStrategy(default_strategy)
    loc = root.locator(to_playwright_selector(strategy, element.selector, element.pseudo_selector))
    if element.index is not None:
        loc = loc.nth(element.index)
    return loc

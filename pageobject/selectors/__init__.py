# pageobject/selectors/__init__.py
"""
Selectors package
-----------------
Parsing of `@name[:pseudo]` element references and translation of resolved
elements (including recursion chains) into Playwright locators.
"""

from .reference import ElementReference, ReferenceKind, is_reference, parse_reference
from .locator import resolve_locator, to_playwright_selector

__all__ = [
    "ElementReference",
    "ReferenceKind",
    "is_reference",
    "parse_reference",
    "resolve_locator",
    "to_playwright_selector",
]

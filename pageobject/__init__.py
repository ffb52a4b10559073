"""
pageobject
----------
Command and selector resolution for page objects: pages and sections declare
named elements, commands take `@name` references instead of raw locators, and
every call resolves them (through nested sections) before reaching the driver.
"""

from pageobject.core.command import ChainableResult, Command
from pageobject.core.element import Element, LocateStrategy
from pageobject.core.errors import DeclarationError, DuplicateCommandError, ElementLookupError
from pageobject.core.loader import CommandLoader, CommandRegistry
from pageobject.core.page import Page, Section

__version__ = "0.1.0"

__all__ = [
    "ChainableResult",
    "Command",
    "CommandLoader",
    "CommandRegistry",
    "DeclarationError",
    "DuplicateCommandError",
    "Element",
    "ElementLookupError",
    "LocateStrategy",
    "Page",
    "Section",
]

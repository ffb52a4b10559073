# pageobject/driver/__init__.py
"""
Driver package
--------------
Playwright side of the command contract: the client passed to every command,
the built-in command loader and the scoped `element(...)` API.
"""

from .client import PlaywrightClient
from .commands import element_commands
from .element_api import ElementAccessor, ElementApi, ScopedElement

__all__ = [
    "PlaywrightClient",
    "element_commands",
    "ElementAccessor",
    "ElementApi",
    "ScopedElement",
]

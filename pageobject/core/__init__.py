"""
Core package: the selector model, command wrapping/registration and the
page/section owners.
Lightweight package init to avoid import cycles.

Consumers should import submodules directly, e.g.:
  from pageobject.core.command import Command
  from pageobject.core.loader import CommandLoader
  from pageobject.core.page import Page, Section
"""

__all__: list[str] = []

# pageobject/core/errors.py
from __future__ import annotations

from typing import Optional, Sequence


class ElementLookupError(LookupError):
    """An `@name` reference (or section name) is not declared on its page/section,
    or is declared with a different locate strategy than requested."""

    def __init__(
        self,
        name: str,
        *,
        owner: str,
        kind: str,
        available: Sequence[str],
        strategy: Optional[str] = None,
    ) -> None:
        self.name = name
        self.owner = owner
        self.kind = kind
        self.available = list(available)
        self.strategy = strategy

        prefix = "Section" if kind == "section" else "Element"
        plural = "sections" if kind == "section" else "elements"
        show_strategy = f"[locateStrategy='{strategy}']" if strategy else ""
        super().__init__(
            f'{prefix} "{name}{show_strategy}" was not found in "{owner}". '
            f"Available {plural}: {', '.join(self.available)}"
        )


class DuplicateCommandError(TypeError):
    """A command name is registered twice on the same target without overwrite."""

    # reporting layers use these to skip the stack trace for construction errors
    displayed = False
    show_trace = False

    def __init__(self, command_name: str) -> None:
        self.command_name = command_name
        super().__init__(
            f'Error while loading the page object commands: the command "{command_name}" is already defined.'
        )


class DeclarationError(ValueError):
    pass

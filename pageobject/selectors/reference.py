# pageobject/selectors/reference.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


REFERENCE_PREFIX = "@"


class ReferenceKind(str, Enum):
    declared = "declared"
    pseudo = "pseudo"


@dataclass(frozen=True)
class ElementReference:
    kind: ReferenceKind
    name: str
    pseudo_selector: Optional[str] = None


def is_reference(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(REFERENCE_PREFIX)


def parse_reference(value: str) -> ElementReference:
    """
    Parse an element reference of the form `@name` or `@name:pseudo`.

    - "@submit"          -> declared reference to `submit`
    - "@link:visible"    -> `link` with pseudo selector "visible"
    - "@row:nth-child(2)"-> `row` with pseudo selector "nth-child(2)"

    Only the first ':' separates name and pseudo selector.
    """
    if not is_reference(value):
        raise ValueError(f"Not an element reference (expected '{REFERENCE_PREFIX}name'): {value!r}")

    body = value[len(REFERENCE_PREFIX):]
    name, sep, pseudo = body.partition(":")
    name = name.strip()
    if not name:
        raise ValueError(f"Element reference has an empty name: {value!r}")

    if not sep:
        return ElementReference(kind=ReferenceKind.declared, name=name)

    pseudo = pseudo.strip()
    if not pseudo:
        raise ValueError(f"Element reference has an empty pseudo selector: {value!r}")
    return ElementReference(kind=ReferenceKind.pseudo, name=name, pseudo_selector=pseudo)

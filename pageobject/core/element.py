# pageobject/core/element.py
from __future__ import annotations

"""Selector model
-----------------
`LocateStrategy` names the ways a driver can find an element; `Element` is the
resolved, per-call description of what to find (a plain selector, an
`@name` reference awaiting resolution, or a recursion chain of scopes).
"""

import dataclasses
import weakref
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union

from pageobject.utils.logger import get_logger

log = get_logger(__name__)


class LocateStrategy(str, Enum):
    css = "css selector"
    xpath = "xpath"
    link_text = "link text"
    partial_link_text = "partial link text"
    tag_name = "tag name"
    # synthetic: each scope of the chain is located inside the previous one
    recursion = "recursion"

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        if isinstance(value, cls):
            return True
        return isinstance(value, str) and value in {m.value for m in cls}


# Properties a resolved reference inherits from its declaration when unset.
_COPYABLE_DEFAULTS = (
    "name",
    "index",
    "timeout",
    "retry_interval",
    "abort_on_failure",
    "suppress_not_found_errors",
)


@dataclass
class Element:
    selector: Union[str, List[Any]]
    locate_strategy: Optional[LocateStrategy] = None
    name: Optional[str] = None
    index: Optional[int] = None
    timeout: Optional[int] = None
    retry_interval: Optional[int] = None
    abort_on_failure: Optional[bool] = None
    suppress_not_found_errors: Optional[bool] = None
    pseudo_selector: Optional[str] = None
    container: Optional[Any] = field(default=None, compare=False, repr=False)
    # non-owning link to the Page/Section that declared this element
    _parent_ref: Optional[weakref.ReferenceType] = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.locate_strategy is not None and not isinstance(self.locate_strategy, LocateStrategy):
            if not LocateStrategy.is_valid(self.locate_strategy):
                raise ValueError(f"Unknown locate strategy: {self.locate_strategy!r}")
            self.locate_strategy = LocateStrategy(self.locate_strategy)

    # ---------- parent ----------

    @property
    def parent(self) -> Optional[Any]:
        return self._parent_ref() if self._parent_ref is not None else None

    @parent.setter
    def parent(self, owner: Optional[Any]) -> None:
        self._parent_ref = weakref.ref(owner) if owner is not None else None

    # ---------- predicates ----------

    def has_element_selector(self) -> bool:
        """True for `@name` references that still need a declaration lookup."""
        return isinstance(self.selector, str) and self.selector.startswith("@")

    @property
    def is_recursive(self) -> bool:
        return self.locate_strategy == LocateStrategy.recursion

    # ---------- construction ----------

    def copy(self) -> "Element":
        clone = dataclasses.replace(self)
        if isinstance(self.selector, list):
            clone.selector = list(self.selector)
        clone._parent_ref = self._parent_ref
        return clone

    @classmethod
    def recursive(cls, scopes: List[Any]) -> "Element":
        return cls(selector=list(scopes), locate_strategy=LocateStrategy.recursion)

    @classmethod
    def create_from_selector(cls, value: Any, using: Optional[str] = None) -> "Element":
        """
        Build an Element from a raw selector string, a descriptor mapping
        ({"selector": ..., "locate_strategy": ...}) or any object exposing a
        `selector` attribute (another Element, a Section, a declaration model).
        """
        if isinstance(value, Element):
            return value.copy()

        if isinstance(value, str):
            return cls(selector=value, locate_strategy=using)

        if isinstance(value, Mapping):
            if "selector" not in value:
                raise ValueError(f"Selector descriptor is missing the 'selector' key: {value!r}")
            kwargs = {f.name: value[f.name] for f in dataclasses.fields(cls) if f.init and f.name in value}
            kwargs.setdefault("locate_strategy", using)
            return cls(**kwargs)

        if getattr(value, "selector", None) is not None:
            kwargs = {
                f.name: getattr(value, f.name)
                for f in dataclasses.fields(cls)
                if f.init and f.name != "container" and getattr(value, f.name, None) is not None
            }
            element = cls(**kwargs)
            element.parent = getattr(value, "parent", None)
            return element

        raise ValueError(f"Cannot create an element from {value!r}")

    @staticmethod
    def copy_defaults(target: "Element", source: Any) -> None:
        """Fill unset properties of `target` from a declared element or section."""
        for prop in _COPYABLE_DEFAULTS:
            if getattr(target, prop) is None:
                setattr(target, prop, getattr(source, prop, None))
        if target.parent is None:
            target.parent = getattr(source, "parent", None)

    def get_recursive_lookup_element(self) -> Optional["Element"]:
        """
        Chain of every enclosing section down to this element, or None when the
        element sits directly on a page (nothing to recurse through).
        """
        scopes: List[Any] = []
        current: Any = self
        while current is not None and current.parent is not None:
            scopes.insert(0, current)
            current = current.parent

        if len(scopes) > 1:
            return Element.recursive(scopes)
        return None

    def __str__(self) -> str:
        if isinstance(self.selector, list):
            return " > ".join(str(getattr(s, "selector", s)) for s in self.selector)
        return self.selector

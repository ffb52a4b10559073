# pageobject/core/declarations.py
from __future__ import annotations

"""Page-object declarations
---------------------------
Pydantic models for the declarative part of a page object (elements, nested
sections, url) and a YAML loader for them, including `${ENV}` substitution
and multi-document files.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from pageobject.core.element import LocateStrategy
from pageobject.core.errors import DeclarationError
from pageobject.utils.config import get_settings


# ---------- Helpers ----------


def _normalize_elements(value: Any) -> Any:
    """
    Accept the shorthand forms for `elements`:

      elements:
        submit: "#go"                        -> {selector: "#go"}
        logo: {selector: "//img", locate_strategy: xpath}

      elements:                             (list of mappings, merged in order)
        - submit: "#go"
        - logo: {selector: "//img", locate_strategy: xpath}
    """
    if value is None:
        return {}
    if isinstance(value, list):
        merged: Dict[str, Any] = {}
        for entry in value:
            if not isinstance(entry, dict):
                raise ValueError("each entry of an elements list must be a mapping")
            merged.update(entry)
        value = merged
    if isinstance(value, dict):
        return {k: ({"selector": v} if isinstance(v, str) else v) for k, v in value.items()}
    return value


_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _subst_env(obj: Any) -> Any:
    if isinstance(obj, str):
        return _ENV_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(0)), obj)
    if isinstance(obj, list):
        return [_subst_env(x) for x in obj]
    if isinstance(obj, dict):
        return {k: _subst_env(v) for k, v in obj.items()}
    return obj


def _format_validation_error(header: str, ve: ValidationError) -> str:
    lines = [header]
    for e in ve.errors():
        loc = ".".join(str(p) for p in e.get("loc", []))
        lines.append(f"  - {loc}: {e.get('msg', 'invalid value')}")
    return "\n".join(lines)


# ---------- Models ----------


class ElementDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    selector: str = Field(..., description="Selector string for the locate strategy")
    locate_strategy: Optional[LocateStrategy] = Field(default=None)
    index: Optional[int] = Field(default=None, ge=0)
    timeout: Optional[int] = Field(default=None, ge=0, description="Milliseconds")
    retry_interval: Optional[int] = Field(default=None, ge=0, description="Milliseconds")
    abort_on_failure: Optional[bool] = None
    suppress_not_found_errors: Optional[bool] = None

    @field_validator("selector")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("selector cannot be empty")
        if v.startswith("@"):
            raise ValueError("a declared selector cannot itself be an @-reference")
        return v


class _ContainerDeclaration(BaseModel):
    elements: Dict[str, ElementDeclaration] = Field(default_factory=dict)
    sections: Dict[str, "SectionDeclaration"] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("sections", "section"),
    )

    @field_validator("elements", mode="before")
    @classmethod
    def _shorthand_elements(cls, v: Any) -> Any:
        return _normalize_elements(v)

    @field_validator("sections", mode="before")
    @classmethod
    def _no_null_sections(cls, v: Any) -> Any:
        return {} if v is None else v


class SectionDeclaration(_ContainerDeclaration, ElementDeclaration):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


class PageDeclaration(_ContainerDeclaration):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    name: str = Field(..., description="Page object name, e.g. 'LoginPage'")
    url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


SectionDeclaration.model_rebuild()
PageDeclaration.model_rebuild()


# ---------- Public API ----------


def parse_page_declaration(data: Any, *, source: str = "<page object>") -> PageDeclaration:
    if not isinstance(data, dict):
        raise DeclarationError(f"Page object {source} must be a mapping/object at the top level.")
    try:
        return PageDeclaration.model_validate(_subst_env(data))
    except ValidationError as ve:
        raise DeclarationError(_format_validation_error(f"Invalid page object {source}:", ve)) from ve


def parse_section_declaration(data: Any, *, source: str = "<section>") -> SectionDeclaration:
    if isinstance(data, SectionDeclaration):
        return data
    if isinstance(data, str):
        data = {"selector": data}
    try:
        return SectionDeclaration.model_validate(data)
    except ValidationError as ve:
        raise DeclarationError(_format_validation_error(f"Invalid section {source}:", ve)) from ve


def parse_element_declarations(data: Any, *, source: str = "<elements>") -> Dict[str, ElementDeclaration]:
    try:
        normalized = _normalize_elements(data)
        return {name: ElementDeclaration.model_validate(v) for name, v in normalized.items()}
    except ValidationError as ve:
        raise DeclarationError(_format_validation_error(f"Invalid elements in {source}:", ve)) from ve
    except ValueError as e:
        raise DeclarationError(f"Invalid elements in {source}: {e}") from e


def load_page_objects(path: Path | str) -> list[PageDeclaration]:
    """
    Load one or more page-object declarations from a YAML file (supports
    multi-document files). A document without `name` takes the file stem.
    """
    po_path = Path(path)
    if not po_path.exists():
        raise FileNotFoundError(f"Page object file not found: {po_path}")

    try:
        docs = list(yaml.safe_load_all(po_path.read_text(encoding="utf-8")))
    except yaml.YAMLError as ye:
        raise DeclarationError(f"YAML parse error in {po_path}: {ye}") from ye

    out: list[PageDeclaration] = []
    for idx, data in enumerate(docs, start=1):
        if data is None:
            continue
        if isinstance(data, dict):
            data.setdefault("name", po_path.stem)
        out.append(parse_page_declaration(data, source=f"'{po_path}' (document {idx})"))

    if not out:
        raise DeclarationError(f"No page object documents found in {po_path}")
    return out


def load_page_object(path: Path | str) -> PageDeclaration:
    """Load a single page-object declaration (the first document of the file)."""
    return load_page_objects(path)[0]


def load_directory(root: Optional[Path | str] = None, *, recursive: bool = True) -> Dict[str, PageDeclaration]:
    """
    Every page object found under `root`, keyed by name (later files win).
    Defaults to the PAGE_OBJECTS_DIR setting.
    """
    base = Path(root) if root is not None else get_settings().PAGE_OBJECTS_DIR
    pattern = "**/*" if recursive else "*"
    files = sorted(list(base.glob(f"{pattern}.yaml")) + list(base.glob(f"{pattern}.yml")))
    pages: Dict[str, PageDeclaration] = {}
    for fp in files:
        for decl in load_page_objects(fp):
            pages[decl.name] = decl
    return pages


__all__ = [
    "ElementDeclaration",
    "SectionDeclaration",
    "PageDeclaration",
    "parse_page_declaration",
    "parse_section_declaration",
    "parse_element_declarations",
    "load_page_objects",
    "load_page_object",
    "load_directory",
]

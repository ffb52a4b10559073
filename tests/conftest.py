from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from pageobject.core.page import Page


class Recorder:
    """Builds command functions that record (name, args) and return a canned result."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, List[Any]]] = []

    def command(self, name: str, result: Any = None) -> Callable[..., Any]:
        def fn(client, *args, **kwargs):
            self.calls.append((name, list(args)))
            return result() if callable(result) else result

        fn.__name__ = name
        return fn

    def loader(self, *names: str, results: Optional[Dict[str, Any]] = None):
        results = results or {}

        def load(registry):
            commands: Dict[str, Any] = {n: self.command(n, results.get(n)) for n in names}
            commands["assert"] = {"visible": self.command("assert.visible")}
            commands["verify"] = {"visible": self.command("verify.visible")}
            commands["expect"] = {
                "element": self.command("expect.element", results.get("expect.element")),
                "section": self.command("expect.section", results.get("expect.section")),
            }
            return commands

        return load

    @property
    def last_args(self) -> List[Any]:
        return self.calls[-1][1]


class RecordingClient:
    """Stands in for PlaywrightClient: contributes recording commands to every page/section."""

    def __init__(self, recorder: Recorder, *names: str, is_async_testcase: bool = False,
                 results: Optional[Dict[str, Any]] = None) -> None:
        self.recorder = recorder
        self.names = names or ("click", "set_value", "get_text", "log_message", "fill_form")
        self.results = results
        self.is_async_testcase = is_async_testcase

    def command_loaders(self):
        return (self.recorder.loader(*self.names, results=self.results),)


PAGE_ELEMENTS = {
    "submit": {"selector": "#go"},
    "logo": {"selector": "//img[@alt='logo']", "locate_strategy": "xpath"},
}

PAGE_SECTIONS = {
    "footer": {
        "selector": "footer",
        "elements": {"link": {"selector": "a.link"}},
        "sections": {
            "social": {
                "selector": ".social",
                "elements": {"twitter": "a.twitter"},
            },
        },
    },
}


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def client(recorder: Recorder) -> RecordingClient:
    return RecordingClient(recorder)


@pytest.fixture
def page(client: RecordingClient) -> Page:
    return Page("SearchPage", client=client, elements=PAGE_ELEMENTS, sections=PAGE_SECTIONS)


@pytest.fixture
def make_client(recorder: Recorder):
    def _make(*names: str, is_async_testcase: bool = False, results: Optional[Dict[str, Any]] = None):
        return RecordingClient(recorder, *names, is_async_testcase=is_async_testcase, results=results)
    return _make


@pytest.fixture
def make_page(make_client):
    def _make(*names: str, is_async_testcase: bool = False, results: Optional[Dict[str, Any]] = None, **kwargs):
        client = make_client(*names, is_async_testcase=is_async_testcase, results=results)
        kwargs.setdefault("elements", PAGE_ELEMENTS)
        kwargs.setdefault("sections", PAGE_SECTIONS)
        return Page("SearchPage", client=client, **kwargs)
    return _make

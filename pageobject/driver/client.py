# pageobject/driver/client.py
from __future__ import annotations

from typing import Any, Callable, List, Optional, Tuple

from playwright.sync_api import Locator

from pageobject.driver.commands import element_commands
from pageobject.driver.element_api import ElementApi
from pageobject.selectors.locator import resolve_locator
from pageobject.utils.config import Settings, get_settings


class PlaywrightClient:
    """
    Execution context handed to every command function as its first argument.

    Wraps a Playwright page (sync or async API). With the async API every
    Playwright call returns an awaitable, so commands return awaitables too;
    set `is_async_testcase=True` in that case so sections chain them as well.
    """

    def __init__(
        self,
        page: Any,
        *,
        is_async_testcase: Optional[bool] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.page = page
        self.settings = settings or get_settings()
        self.is_async_testcase = (
            self.settings.ASYNC_TESTCASE if is_async_testcase is None else is_async_testcase
        )
        self.soft_failures: List[str] = []

    def url(self) -> str:
        return self.page.url

    def locate(self, selector: Any, *, root: Any = None) -> Locator:
        return resolve_locator(
            root if root is not None else self.page,
            selector,
            default_strategy=self.settings.DEFAULT_LOCATE_STRATEGY,
        )

    def command_loaders(self) -> Tuple[Callable[..., Any], ...]:
        """Loaders applied to every page and section built on this client."""
        return (element_commands,)

    def create_element_api(self) -> ElementApi:
        return ElementApi(self)

    def __repr__(self) -> str:
        mode = "async" if self.is_async_testcase else "sync"
        return f"<PlaywrightClient {mode} {self.page!r}>"

# pageobject/driver/commands.py
from __future__ import annotations

"""Built-in Playwright commands
-------------------------------
The command loader every `PlaywrightClient` contributes to pages and
sections. Each function takes the client first, then the (already resolved)
element and the command's own arguments, and returns whatever Playwright
returns: a plain value with the sync API, an awaitable with the async API.

A trailing callable argument is treated as a result callback, so values are
reachable from fluent chains:

    page.get_text("@title", lambda text: print(text)).click("@next")
"""

import inspect
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from playwright.async_api import expect as async_expect
from playwright.sync_api import expect as sync_expect

from pageobject.assertions import UrlMatches, run_assertion, unpack_assertion_args
from pageobject.core.element import LocateStrategy
from pageobject.utils.timing import measure


# ---------- Helpers ----------


def _split_args(args: Sequence[Any]) -> Tuple[Any, List[Any], Optional[Callable[[Any], Any]]]:
    """(selector, remaining args, callback); accepts the ("xpath", "//a") form."""
    args = list(args)
    callback = args.pop() if args and callable(args[-1]) else None
    if not args:
        raise TypeError("an element selector is required")

    if len(args) >= 2 and isinstance(args[0], str) and isinstance(args[1], str) \
            and LocateStrategy.is_valid(args[0]) and args[0] != LocateStrategy.recursion.value:
        return {"selector": args[1], "locate_strategy": args[0]}, args[2:], callback
    return args[0], args[1:], callback


def _timeout_for(client: Any, selector: Any) -> int:
    timeout = getattr(selector, "timeout", None)
    if timeout is None and isinstance(selector, dict):
        timeout = selector.get("timeout")
    return timeout if timeout is not None else client.settings.ELEMENT_TIMEOUT_MS


def _deliver(value: Any, callback: Optional[Callable[[Any], Any]]) -> Any:
    if callback is None:
        return value
    if inspect.isawaitable(value):
        async def _then() -> Any:
            result = await value
            callback(result)
            return result
        return _then()
    callback(value)
    return value


def _assertion(factory: Callable[..., Any], *, abort_on_failure: bool) -> Callable[..., Any]:
    def run(client: Any, *args: Any) -> Any:
        args, negate = unpack_assertion_args(args)
        return run_assertion(factory, client, *args, negate=negate, abort_on_failure=abort_on_failure)
    run.__name__ = getattr(factory, "__name__", "assertion")
    return run


# ---------- Loader ----------


def element_commands(registry: Any) -> Dict[str, Any]:
    owner = registry.page_object_item

    @measure("click")
    def click(client, *args):
        selector, _, callback = _split_args(args)
        loc = client.locate(selector)
        return _deliver(loc.click(timeout=_timeout_for(client, selector)), callback)

    @measure("set_value")
    def set_value(client, *args):
        selector, rest, callback = _split_args(args)
        if not rest:
            raise TypeError("set_value() needs a value to type")
        loc = client.locate(selector)
        return _deliver(loc.fill(str(rest[0]), timeout=_timeout_for(client, selector)), callback)

    @measure("clear_value")
    def clear_value(client, *args):
        selector, _, callback = _split_args(args)
        return _deliver(client.locate(selector).clear(timeout=_timeout_for(client, selector)), callback)

    def get_text(client, *args):
        selector, _, callback = _split_args(args)
        return _deliver(client.locate(selector).inner_text(timeout=_timeout_for(client, selector)), callback)

    def get_value(client, *args):
        selector, _, callback = _split_args(args)
        return _deliver(client.locate(selector).input_value(timeout=_timeout_for(client, selector)), callback)

    def get_attribute(client, *args):
        selector, rest, callback = _split_args(args)
        if not rest:
            raise TypeError("get_attribute() needs an attribute name")
        loc = client.locate(selector)
        return _deliver(loc.get_attribute(rest[0], timeout=_timeout_for(client, selector)), callback)

    def is_visible(client, *args):
        selector, _, callback = _split_args(args)
        return _deliver(client.locate(selector).is_visible(), callback)

    @measure("wait_for_element_visible")
    def wait_for_element_visible(client, *args):
        selector, _, callback = _split_args(args)
        loc = client.locate(selector)
        return _deliver(loc.wait_for(state="visible", timeout=_timeout_for(client, selector)), callback)

    @measure("wait_for_element_present")
    def wait_for_element_present(client, *args):
        selector, _, callback = _split_args(args)
        loc = client.locate(selector)
        return _deliver(loc.wait_for(state="attached", timeout=_timeout_for(client, selector)), callback)

    def get_url(client, callback=None):
        return _deliver(client.url(), callback)

    def expect_element(client, selector):
        expect = async_expect if client.is_async_testcase else sync_expect
        return expect(client.locate(selector))

    commands: Dict[str, Any] = {
        "click": click,
        "set_value": set_value,
        "clear_value": clear_value,
        "get_text": get_text,
        "get_value": get_value,
        "get_attribute": get_attribute,
        "is_visible": is_visible,
        "wait_for_element_visible": wait_for_element_visible,
        "wait_for_element_present": wait_for_element_present,
        "get_url": get_url,
        "assert": {"url_matches": _assertion(UrlMatches, abort_on_failure=True)},
        "verify": {"url_matches": _assertion(UrlMatches, abort_on_failure=False)},
        "expect": {"element": expect_element, "section": expect_element},
    }

    # only pages know where they live
    if hasattr(owner, "url"):
        def navigate(client, url=None, callback=None):
            target = url or owner.url
            if not target:
                raise ValueError(f"{owner!r} has no url to navigate to")
            return _deliver(client.page.goto(target), callback)

        commands["navigate"] = navigate

    return commands

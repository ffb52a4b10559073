import asyncio
from unittest.mock import MagicMock

import pytest

from pageobject.core.command import ChainableResult
from pageobject.core.element import LocateStrategy
from pageobject.selectors.locator import resolve_locator


class Deferred:
    """A non-coroutine awaitable, like the futures some drivers hand back."""

    def __init__(self, value):
        self.value = value

    def __await__(self):
        if False:
            yield
        return self.value


def test_sync_command_returns_owner_for_chaining(page, recorder):
    assert page.click("@submit") is page

    footer = page.section["footer"]
    assert footer.click("@link").click(".btn") is footer
    assert [name for name, _ in recorder.calls] == ["click", "click"]


def test_expect_returns_raw_result(make_page):
    page = make_page(results={"expect.element": "raw assertion"})
    assert page.expect.element("@submit") == "raw assertion"


def test_awaitable_on_page_becomes_chainable_result(make_page):
    page = make_page("get_text", results={"get_text": lambda: Deferred("Hello")})

    result = page.get_text("@submit")
    assert isinstance(result, ChainableResult)
    assert result.owner is page
    assert result.get_text.__wrapped__ is page.get_text

    async def main():
        return await result, await result

    assert asyncio.run(main()) == ("Hello", "Hello")


def test_awaitable_on_section_returns_section_in_sync_mode(make_page):
    page = make_page("get_text", results={"get_text": lambda: Deferred("Hi")})
    footer = page.section["footer"]
    assert footer.get_text("@link") is footer


def test_awaitable_on_section_chains_in_async_testcase(make_page):
    page = make_page("get_text", is_async_testcase=True, results={"get_text": lambda: Deferred("Hi")})
    footer = page.section["footer"]

    result = footer.get_text("@link")
    assert isinstance(result, ChainableResult)
    assert result.owner is footer

    async def main():
        return await result

    assert asyncio.run(main()) == "Hi"


def test_chained_awaitables_run_in_call_order(make_page, recorder):
    order = []

    def step(label):
        async def run():
            order.append(label)
            return label
        return run()

    page = make_page(commands=[lambda registry: {"step": lambda client, label: step(label)}])

    async def main():
        first = page.step("one")
        second = first.step("two")
        value = await second
        return value, await first

    assert asyncio.run(main()) == ("two", "one")
    assert order == ["one", "two"]


def test_chain_built_outside_loop_runs_every_link(make_page):
    order = []

    def step(label):
        async def run():
            order.append(label)
            return label
        return run()

    page = make_page(commands=[lambda registry: {"step": lambda client, label: step(label)}])
    chain = page.step("one").step("two")
    assert chain.previous.previous is None

    async def main():
        return await chain

    assert asyncio.run(main()) == "two"
    assert order == ["one", "two"]


def test_failure_early_in_awaited_chain_is_raised(make_page):
    async def fail():
        raise RuntimeError("first command failed")

    async def succeed():
        return "two"

    page = make_page(commands=[{"boom": lambda client: fail(), "ok": lambda client: succeed()}])

    async def main():
        return await page.boom().ok()

    with pytest.raises(RuntimeError, match="first command failed"):
        asyncio.run(main())


def test_failure_early_in_chain_created_outside_loop_skips_later_links(make_page):
    ran = []

    async def fail():
        raise RuntimeError("first command failed")

    async def later():
        ran.append("later")

    page = make_page(commands=[{"boom": lambda client: fail(), "later": lambda client: later()}])
    chain = page.boom().later()

    async def main():
        return await chain

    with pytest.raises(RuntimeError, match="first command failed"):
        asyncio.run(main())
    assert ran == []


def test_command_errors_propagate(make_page):
    def boom(client, *args):
        raise RuntimeError("driver went away")

    page = make_page(commands=[{"explode": boom}])
    with pytest.raises(RuntimeError, match="driver went away"):
        page.explode("@submit")


def test_command_receives_client_first(make_page):
    seen = []
    page = make_page(commands=[{"peek": lambda client, *args: seen.append(client)}])
    page.peek()
    assert seen == [page.client]
    assert page.section["footer"].client is page.client


def test_within_wraps_builtin_commands_in_recursion_chain(page, recorder):
    page.within("#search-form").click("@submit")

    chain = recorder.last_args[0]
    assert chain.locate_strategy == LocateStrategy.recursion
    assert chain.selector[0].selector == "#search-form"
    assert chain.selector[1].selector == "#go"


def test_within_sets_container_for_user_defined_commands(page, recorder):
    page.within("@logo").fill_form("@submit", "value")

    el, value = recorder.last_args
    assert el.selector == "#go"
    assert el.container.selector == "//img[@alt='logo']"
    assert el.container.locate_strategy == LocateStrategy.xpath
    assert value == "value"


def test_within_reaches_namespaced_commands(page, recorder):
    page.within(".results").assert_.visible(".row")

    name, args = recorder.calls[-1]
    assert name == "assert.visible"
    assert args[0].selector == ".row"
    assert args[0].container.selector == ".results"


def test_within_on_section_scopes_user_defined_commands_once(page, recorder):
    page.section["footer"].within(".box").fill_form(".inp")

    el = recorder.last_args[0]
    assert el.selector == ".inp"
    assert not el.is_recursive
    container = el.container
    assert container.locate_strategy == LocateStrategy.recursion
    assert [scope.selector for scope in container.selector] == ["footer", ".box"]

    root = MagicMock()
    located = resolve_locator(root, el)
    root.locator.assert_called_once_with("footer")
    footer = root.locator.return_value
    footer.locator.assert_called_once_with(".box")
    box = footer.locator.return_value
    box.locator.assert_called_once_with(".inp")
    assert located is box.locator.return_value


def test_within_on_section_resolves_references_inside_container(page, recorder):
    page.section["footer"].within(".box").click("@link")

    chain = recorder.last_args[0]
    assert chain.locate_strategy == LocateStrategy.recursion
    container, target = chain.selector
    assert [scope.selector for scope in container.selector] == ["footer", ".box"]
    assert target.selector == "a.link"
    assert not target.is_recursive

    root = MagicMock()
    resolve_locator(root, chain)
    root.locator.assert_called_once_with("footer")
    root.locator.return_value.locator.assert_called_once_with(".box")
    root.locator.return_value.locator.return_value.locator.assert_called_once_with("a.link")


def test_within_leaves_owner_unscoped(page, recorder):
    page.within(".results").click(".row")
    page.click(".row")
    assert recorder.last_args == [".row"]

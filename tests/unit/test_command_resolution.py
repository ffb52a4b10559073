import pytest

from pageobject.core.command import Command
from pageobject.core.element import Element, LocateStrategy
from pageobject.core.errors import ElementLookupError


def test_page_reference_resolves_to_declared_selector(page, recorder):
    page.click("@submit")

    name, args = recorder.calls[-1]
    assert name == "click"
    el = args[0]
    assert isinstance(el, Element)
    assert el.selector == "#go"
    assert el.locate_strategy is None
    assert el.pseudo_selector is None
    assert el.name == "submit"


def test_pseudo_selector_is_carried(page, recorder):
    page.click("@submit:visible")
    assert recorder.last_args[0].selector == "#go"
    assert recorder.last_args[0].pseudo_selector == "visible"


def test_declared_strategy_is_copied(page, recorder):
    page.click("@logo")
    el = recorder.last_args[0]
    assert el.selector == "//img[@alt='logo']"
    assert el.locate_strategy == LocateStrategy.xpath


def test_declared_element_is_never_mutated(page):
    page.click("@submit:visible")
    assert page.elements["submit"].pseudo_selector is None
    assert page.elements["submit"].selector == "#go"


def test_section_element_gets_recursion_chain(page, recorder):
    footer = page.section["footer"]
    footer.click("@link")

    chain = recorder.last_args[0]
    assert chain.locate_strategy == LocateStrategy.recursion
    assert len(chain.selector) == 2
    assert chain.selector[0] is footer
    assert chain.selector[1].selector == "a.link"


def test_nested_section_chain_lists_every_ancestor(page, recorder):
    footer = page.section["footer"]
    social = footer.section["social"]
    social.click("@twitter")

    chain = recorder.last_args[0]
    assert chain.is_recursive
    assert chain.selector[0] is footer
    assert chain.selector[1] is social
    assert chain.selector[2].selector == "a.twitter"


def test_repeated_resolution_is_identical(page, recorder):
    footer = page.section["footer"]
    footer.click("@link")
    first = recorder.last_args[0]
    footer.click("@link")
    second = recorder.last_args[0]

    assert first == second
    assert len(second.selector) == 2


def test_unknown_reference_lists_available_elements(page, recorder):
    with pytest.raises(ElementLookupError) as exc:
        page.click("@nope")

    assert exc.value.available == ["submit", "logo"]
    assert str(exc.value) == 'Element "nope" was not found in "SearchPage". Available elements: submit, logo'
    assert recorder.calls == []


def test_strategy_mismatch_is_a_lookup_error(page, recorder):
    with pytest.raises(ElementLookupError) as exc:
        page.click({"selector": "@submit", "locate_strategy": "xpath"})

    message = str(exc.value)
    assert "submit[locateStrategy='xpath']" in message
    assert "submit[locateStrategy='null']" in message
    assert "'None'" not in message
    assert "logo[locateStrategy='xpath']" in message
    assert recorder.calls == []


def test_matching_strategy_resolves(page, recorder):
    page.click({"selector": "@logo", "locate_strategy": "xpath"})
    assert recorder.last_args[0].selector == "//img[@alt='logo']"


def test_literal_selector_on_page_is_untouched(page, recorder):
    page.click(".btn")
    assert recorder.last_args == [".btn"]


def test_literal_selector_on_section_is_scoped(page, recorder):
    footer = page.section["footer"]
    footer.click(".btn")

    chain = recorder.last_args[0]
    assert chain.is_recursive
    assert chain.selector[0] is footer
    assert chain.selector[1].selector == ".btn"


def test_strategy_pair_is_collapsed_into_one_element(page, recorder):
    footer = page.section["footer"]
    footer.set_value("xpath", "//input", "hello")

    args = recorder.last_args
    assert len(args) == 2
    assert args[0].selector[1].selector == "//input"
    assert args[0].selector[1].locate_strategy == LocateStrategy.xpath
    assert args[1] == "hello"


def test_non_element_command_passes_strings_through(page, recorder):
    page.section["footer"].log_message("hello world")
    assert recorder.last_args == ["hello world"]


def test_reference_resolved_for_any_command(page, recorder):
    page.log_message("@submit")
    assert recorder.last_args[0].selector == "#go"


def test_expect_section_resolves_against_sections(page, recorder):
    page.expect.section("@footer")
    el = recorder.last_args[0]
    assert el.selector == "footer"
    assert not el.is_recursive

    footer = page.section["footer"]
    footer.expect.section("@social")
    chain = recorder.last_args[0]
    assert chain.selector[0] is footer
    assert chain.selector[1].selector == ".social"


def test_expect_section_unknown_lists_sections(page):
    with pytest.raises(ElementLookupError) as exc:
        page.expect.section("@header")
    assert exc.value.kind == "section"
    assert exc.value.available == ["footer"]
    assert str(exc.value).startswith('Section "header" was not found')


def test_structured_args_are_resolved_in_place(page, recorder):
    page.assert_.not_.visible("@submit")

    payload = recorder.last_args[0]
    assert payload["negate"] is True
    assert payload["args"][0].selector == "#go"


def test_selector_from_args():
    cmd = Command(None, "click")
    assert cmd.get_selector_from_args([]) == (None, 0)
    assert cmd.get_selector_from_args(["#go"]) == ("#go", 1)
    assert cmd.get_selector_from_args(["xpath", "//a"]) == ({"selector": "//a", "locate_strategy": "xpath"}, 2)
    assert cmd.get_selector_from_args([["#a", "#b"]]) == (None, 0)

    other = Command(None, "log_message")
    assert other.get_selector_from_args(["hello"]) == (None, 0)
    assert other.get_selector_from_args(["@submit"]) == ("@submit", 1)

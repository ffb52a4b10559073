import pytest

from pageobject.selectors.reference import ReferenceKind, is_reference, parse_reference


def test_parse_plain_reference():
    ref = parse_reference("@submit")
    assert ref.kind == ReferenceKind.declared
    assert ref.name == "submit"
    assert ref.pseudo_selector is None


def test_parse_reference_with_pseudo_selector():
    ref = parse_reference("@link:visible")
    assert ref.kind == ReferenceKind.pseudo
    assert (ref.name, ref.pseudo_selector) == ("link", "visible")


def test_only_first_colon_splits():
    ref = parse_reference("@row:nth-child(2):hover")
    assert ref.name == "row"
    assert ref.pseudo_selector == "nth-child(2):hover"


@pytest.mark.parametrize("value", ["@", "@:visible", "@a:", "#go", ""])
def test_malformed_references_rejected(value):
    with pytest.raises(ValueError):
        parse_reference(value)


def test_is_reference():
    assert is_reference("@submit")
    assert not is_reference("#submit")
    assert not is_reference({"selector": "@submit"})

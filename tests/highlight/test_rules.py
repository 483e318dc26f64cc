"""Tests for :mod:`htmlrefs.highlight.rules`."""

from __future__ import annotations

import pytest

from htmlrefs.core.config import HighlightSettings
from htmlrefs.document import AttributeNode, ElementNode, TextRange
from htmlrefs.highlight import ClassTokenizer, EqualityPolicy, SymbolKind, build_rule_set
from htmlrefs.highlight.rules import is_radio_input


def _element(name: str, /, **attributes: str) -> ElementNode:
    nodes = tuple(
        AttributeNode(key.replace("_", "-"), value, TextRange(0, len(value)))
        for key, value in attributes.items()
    )
    return ElementNode(name=name, attributes=nodes)


def test_rule_set_has_one_rule_per_kind_in_precedence_order() -> None:
    rules = build_rule_set()

    assert [rule.kind for rule in rules.rules] == [
        SymbolKind.CLASS_NAME,
        SymbolKind.FRAME_OR_WINDOW_NAME,
        SymbolKind.ELEMENT_ID,
        SymbolKind.RADIO_GROUP_NAME,
    ]
    assert rules.for_kind(SymbolKind.CLASS_NAME).policy is EqualityPolicy.TOKEN
    for kind in (
        SymbolKind.FRAME_OR_WINDOW_NAME,
        SymbolKind.ELEMENT_ID,
        SymbolKind.RADIO_GROUP_NAME,
    ):
        assert rules.for_kind(kind).policy is EqualityPolicy.EXACT


def test_reference_only_kinds_have_no_definition_sites() -> None:
    rules = build_rule_set()

    assert rules.for_kind(SymbolKind.CLASS_NAME).definitions == ()
    assert rules.for_kind(SymbolKind.RADIO_GROUP_NAME).definitions == ()
    assert len(rules.for_kind(SymbolKind.ELEMENT_ID).definitions) == 1


def test_element_id_reference_sites() -> None:
    rule = build_rule_set().for_kind(SymbolKind.ELEMENT_ID)

    sites = {(site.attribute, site.elements, site.prefix) for site in rule.references}

    assert sites == {
        ("for", frozenset({"label"}), ""),
        ("href", frozenset({"a"}), "#"),
        ("aria-labelledby", frozenset(), ""),
        ("aria-describedby", frozenset(), ""),
        ("aria-controls", frozenset(), ""),
    }


def test_site_matching_ignores_case() -> None:
    rule = build_rule_set().for_kind(SymbolKind.FRAME_OR_WINDOW_NAME)
    frame_site = rule.definitions[0]
    element = _element("IFrame", NAME="main")

    assert frame_site.matches(element, element.attributes[0])
    assert frame_site.attribute_of(element) is element.attributes[0]
    assert frame_site.attribute_of(_element("div", name="main")) is None


def test_site_skips_valueless_attributes() -> None:
    site = build_rule_set().for_kind(SymbolKind.ELEMENT_ID).definitions[0]
    element = ElementNode(name="div", attributes=(AttributeNode("id"),))

    assert site.attribute_of(element) is None


def test_target_trigger_excludes_reserved_names_only_when_triggering() -> None:
    settings = HighlightSettings(reserved_frame_names=("_blank", "_self"))
    rule = build_rule_set(settings).for_kind(SymbolKind.FRAME_OR_WINDOW_NAME)
    trigger = rule.triggers[1]
    reference = rule.references[0]

    assert trigger.strip("_blank") is None
    assert trigger.strip("_top") == "_top"
    assert reference.strip("_blank") == "_blank"


def test_href_site_strips_fragment_marker() -> None:
    rule = build_rule_set().for_kind(SymbolKind.ELEMENT_ID)
    href = next(site for site in rule.triggers if site.attribute == "href")

    assert href.strip("#top") == "top"
    assert href.strip("#") == ""
    assert href.strip("top") is None


@pytest.mark.parametrize(
    ("type_value", "expected"),
    [("radio", True), ("RADIO", True), ("Radio", True), ("checkbox", False), (None, False)],
)
def test_is_radio_input(type_value: str | None, expected: bool) -> None:
    element = _element("input") if type_value is None else _element("input", type=type_value)

    assert is_radio_input(element) is expected


def test_class_tokenizer_tokens_and_boundaries() -> None:
    tokenizer = ClassTokenizer()

    assert [m.group(0) for m in tokenizer.tokens("a-b  c_d\te")] == ["a-b", "c_d", "e"]
    match = tokenizer.token_at("one two", 3)
    assert match is not None and match.group(0) == "one"
    assert tokenizer.token_at("one  two", 4) is None
    assert tokenizer.token_at("", 0) is None


def test_class_tokenizer_uses_configured_pattern() -> None:
    rules = build_rule_set(HighlightSettings(class_token_pattern=r"[^\s]+"))

    assert rules.tokenizer.pattern == r"[^\s]+"
    match = rules.tokenizer.token_at("md:flex p-2", 2)
    assert match is not None and match.group(0) == "md:flex"

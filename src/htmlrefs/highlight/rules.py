"""Table-driven matching rules, one row per :class:`SymbolKind`.

Each :class:`ReferenceRule` lists the attribute sites that can put the cursor
on a symbol (``triggers``), the sites that declare it (``definitions``) and
the sites that point at it (``references``), plus how attribute values are
compared with the symbol value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import re
from typing import Callable, Iterable, Iterator

from htmlrefs.core.config import HighlightSettings
from htmlrefs.document.nodes import AttributeNode, ElementNode

from .symbols import SymbolKind

__all__ = [
    "EqualityPolicy",
    "ClassTokenizer",
    "AttributeSite",
    "ReferenceRule",
    "ReferenceRuleSet",
    "build_rule_set",
    "is_radio_input",
]


class EqualityPolicy(StrEnum):
    """How an attribute value is compared with a symbol value."""

    EXACT = "exact"
    TOKEN = "token"


class ClassTokenizer:
    """Split ``class`` attribute values into CSS class tokens."""

    def __init__(self, pattern: str = "[A-Za-z0-9_-]+") -> None:
        self._regex = re.compile(pattern)

    @property
    def pattern(self) -> str:
        return self._regex.pattern

    def tokens(self, value: str) -> Iterator[re.Match[str]]:
        return self._regex.finditer(value)

    def token_at(self, value: str, relative: int) -> re.Match[str] | None:
        """Return the token touching ``relative``, including its end boundary."""

        for match in self.tokens(value):
            if match.start() <= relative <= match.end():
                return match
        return None


def is_radio_input(element: ElementNode) -> bool:
    value = element.get_attribute_value("type")
    return value is not None and value.casefold() == "radio"


@dataclass(frozen=True, slots=True)
class AttributeSite:
    """One attribute position at which a symbol may be declared or used.

    An empty ``elements`` set accepts any element. ``prefix`` is stripped from
    the value before comparison and excluded from emitted spans.
    """

    attribute: str
    elements: frozenset[str] = frozenset()
    prefix: str = ""
    condition: Callable[[ElementNode], bool] | None = None
    excluded_values: frozenset[str] = frozenset()

    def applies_to(self, element: ElementNode) -> bool:
        if self.elements and not element.is_named(*self.elements):
            return False
        return self.condition is None or self.condition(element)

    def matches(self, element: ElementNode, attribute: AttributeNode) -> bool:
        """Return ``True`` when ``attribute`` of ``element`` is this site."""

        return attribute.is_named(self.attribute) and self.applies_to(element)

    def attribute_of(self, element: ElementNode) -> AttributeNode | None:
        if not self.applies_to(element):
            return None
        attribute = element.get_attribute(self.attribute)
        if attribute is None or attribute.value is None or attribute.value_range is None:
            return None
        return attribute

    def strip(self, value: str) -> str | None:
        """Return ``value`` without the site prefix, or ``None`` if absent."""

        if value in self.excluded_values:
            return None
        if not value.startswith(self.prefix):
            return None
        return value[len(self.prefix) :]


def _site(
    attribute: str,
    elements: Iterable[str] = (),
    *,
    prefix: str = "",
    condition: Callable[[ElementNode], bool] | None = None,
    excluded_values: frozenset[str] = frozenset(),
) -> AttributeSite:
    return AttributeSite(
        attribute=attribute,
        elements=frozenset(name.casefold() for name in elements),
        prefix=prefix,
        condition=condition,
        excluded_values=excluded_values,
    )


@dataclass(frozen=True, slots=True)
class ReferenceRule:
    """Matching rule for one symbol kind."""

    kind: SymbolKind
    policy: EqualityPolicy
    triggers: tuple[AttributeSite, ...]
    definitions: tuple[AttributeSite, ...] = ()
    references: tuple[AttributeSite, ...] = ()


_FRAME_ELEMENTS = ("iframe", "frame")
_TARGET_ELEMENTS = ("a", "form", "area", "base")
_ARIA_ID_ATTRIBUTES = ("aria-labelledby", "aria-describedby", "aria-controls")


@dataclass(frozen=True, slots=True)
class ReferenceRuleSet:
    """Ordered rules; trigger precedence follows rule order then site order."""

    rules: tuple[ReferenceRule, ...]
    tokenizer: ClassTokenizer

    def for_kind(self, kind: SymbolKind) -> ReferenceRule:
        for rule in self.rules:
            if rule.kind is kind:
                return rule
        raise KeyError(f"No reference rule registered for {kind!r}")

    def iter_triggers(self) -> Iterator[tuple[ReferenceRule, AttributeSite]]:
        for rule in self.rules:
            for site in rule.triggers:
                yield rule, site


def build_rule_set(settings: HighlightSettings | None = None) -> ReferenceRuleSet:
    """Return the rule table configured by ``settings``."""

    settings = settings or HighlightSettings()
    reserved = frozenset(settings.reserved_frame_names)

    class_site = _site("class")
    frame_name_site = _site("name", _FRAME_ELEMENTS)
    target_site = _site("target", _TARGET_ELEMENTS)
    id_site = _site("id")
    radio_site = _site("name", ("input",), condition=is_radio_input)

    rules = (
        ReferenceRule(
            kind=SymbolKind.CLASS_NAME,
            policy=EqualityPolicy.TOKEN,
            triggers=(class_site,),
            references=(class_site,),
        ),
        ReferenceRule(
            kind=SymbolKind.FRAME_OR_WINDOW_NAME,
            policy=EqualityPolicy.EXACT,
            triggers=(
                frame_name_site,
                _site("target", _TARGET_ELEMENTS, excluded_values=reserved),
            ),
            definitions=(frame_name_site,),
            references=(target_site,),
        ),
        ReferenceRule(
            kind=SymbolKind.ELEMENT_ID,
            policy=EqualityPolicy.EXACT,
            triggers=(
                id_site,
                _site("for"),
                *(_site(name) for name in _ARIA_ID_ATTRIBUTES),
                _site("href", prefix="#"),
            ),
            definitions=(id_site,),
            references=(
                _site("for", ("label",)),
                _site("href", ("a",), prefix="#"),
                *(_site(name) for name in _ARIA_ID_ATTRIBUTES),
            ),
        ),
        ReferenceRule(
            kind=SymbolKind.RADIO_GROUP_NAME,
            policy=EqualityPolicy.EXACT,
            triggers=(radio_site,),
            references=(radio_site,),
        ),
    )
    return ReferenceRuleSet(
        rules=rules,
        tokenizer=ClassTokenizer(settings.class_token_pattern),
    )

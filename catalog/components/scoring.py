"""Relevance scoring for free-text component search.

A term scores against three fields. A hit at the start of a field counts
more than a hit somewhere inside it, and the value field weighs most: a
search for ``10k`` is after resistors of that value, not every part with
"10k" buried in its description.
"""

from typing import Iterable, List

from .models import Component

PREFIX_MATCH = 2
INTERIOR_MATCH = 1

CATEGORY_WEIGHT = 1
VALUE_WEIGHT = 3
DESCRIPTION_WEIGHT = 2


def normalize_term(term: str) -> str:
    return (term or "").strip().casefold()


def string_score(needle: str, haystack: str) -> int:
    """Score a normalized ``needle`` against ``haystack``."""
    position = (haystack or "").casefold().find(needle)
    if position < 0:
        return 0
    if position == 0:
        return PREFIX_MATCH
    return INTERIOR_MATCH


def match_score(term: str, component: Component) -> int:
    needle = normalize_term(term)
    if not needle:
        return 0
    return (CATEGORY_WEIGHT * string_score(needle, component.category)
            + VALUE_WEIGHT * string_score(needle, component.value)
            + DESCRIPTION_WEIGHT * string_score(needle, component.description))


def rank(term: str, components: Iterable[Component]) -> List[Component]:
    """
    Return the components matching ``term``, best first.

    Components that score zero are dropped. Equal scores keep ascending id
    order so results are stable between calls.
    """
    scored = []
    for component in components:
        score = match_score(term, component)
        if score > 0:
            scored.append((score, component))
    scored.sort(key=lambda item: (-item[0], item[1].id))
    return [component for _, component in scored]

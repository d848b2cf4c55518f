"""
Keyword-based practice-area classification.

Maps free-text business names and type labels onto the practice-area
taxonomy so listings can be filtered by specialty.
"""
from typing import FrozenSet, Iterable, Optional, Tuple

from afterhours.data.practice_areas import (
    EMERGENCY_PRACTICE_AREAS,
    GENERAL_PRACTICE,
    PRACTICE_AREAS,
    PracticeArea,
)


class PracticeAreaClassifier:
    """
    Classifies businesses into practice areas by case-insensitive substring
    matching.

    A business can match several areas; all are kept. When nothing matches
    (and no context tags were supplied) the result is exactly {"general"}.
    """

    def __init__(
        self,
        taxonomy: Tuple[PracticeArea, ...] = PRACTICE_AREAS,
        emergency_areas: Tuple[str, ...] = EMERGENCY_PRACTICE_AREAS,
    ):
        """
        Args:
            taxonomy: Practice areas with their keywords (defaults to the
                      built-in table)
            emergency_areas: Slugs that get emergency listing pages
        """
        self.taxonomy = tuple(taxonomy)
        self.emergency_areas = frozenset(emergency_areas)
        self._by_slug = {area.slug: area for area in self.taxonomy}
        # Lower-case keywords once; matching runs for every ingested place
        self._keywords = tuple(
            (area.slug, tuple(k.lower() for k in area.keywords))
            for area in self.taxonomy
        )

    def classify(self, *texts: Optional[str], context_tags: Iterable[str] = ()) -> FrozenSet[str]:
        """
        Classify business text into practice-area slugs.

        Args:
            *texts: Display name, type label, etc. None values are ignored.
            context_tags: Areas already known from the search context; always
                          included in the result.

        Returns:
            Frozen set of slugs, {"general"} when nothing matched.
        """
        haystacks = [t.lower() for t in texts if t]
        matched = {
            slug
            for slug, keywords in self._keywords
            if any(keyword in text for text in haystacks for keyword in keywords)
        }
        matched.update(tag for tag in context_tags if tag)

        if len(matched) > 1:
            matched.discard(GENERAL_PRACTICE)
        if not matched:
            return frozenset({GENERAL_PRACTICE})
        return frozenset(matched)

    def ordered(self, slugs: Iterable[str]) -> list:
        """Slugs in taxonomy order, unknown slugs (e.g. "general") last, sorted."""
        slugs = set(slugs)
        known = [area.slug for area in self.taxonomy if area.slug in slugs]
        extra = sorted(slugs.difference(known))
        return known + extra

    def lookup(self, slug: str) -> Optional[PracticeArea]:
        return self._by_slug.get(slug)

    def is_emergency_area(self, slug: str) -> bool:
        return slug in self.emergency_areas

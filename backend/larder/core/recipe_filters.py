"""Recipe Search/Filter Predicate — scopes the recipe listing.

Invariants:
    - Visibility baseline: viewer created the recipe OR is in its share set
    - ADMIN has NO blanket listing visibility (unlike single-record access)
    - Provided filters are ANDed; tags are ORed among themselves
    - Blank filter values mean "not provided"
"""

from dataclasses import dataclass
from uuid import UUID

from larder.core.domain_types import RecipeStatus
from larder.core.repository_protocols import RecipeLike


@dataclass(frozen=True)
class RecipeFilters:
    """Listing filters. None means the filter is not applied."""
    name: str | None = None
    ingredient: str | None = None
    cuisine_type: str | None = None
    status: RecipeStatus | None = None
    prep_time: int | None = None
    tags: tuple[str, ...] = ()

    @classmethod
    def from_query(
        cls,
        name: str | None = None,
        ingredient: str | None = None,
        cuisine_type: str | None = None,
        status: RecipeStatus | None = None,
        prep_time: int | None = None,
        tags: str | None = None,
    ) -> "RecipeFilters":
        return cls(
            name=_blank_to_none(name),
            ingredient=_blank_to_none(ingredient),
            cuisine_type=_blank_to_none(cuisine_type),
            status=status,
            prep_time=prep_time,
            tags=parse_tags(tags),
        )


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def parse_tags(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated tag filter, dropping empty entries."""
    if not raw:
        return ()
    return tuple(t.strip() for t in raw.split(",") if t.strip())


def _contains(haystack: str, needle: str) -> bool:
    return needle.casefold() in haystack.casefold()


def is_listed_for(viewer_id: UUID, recipe: RecipeLike) -> bool:
    return recipe.created_by_id == viewer_id or viewer_id in recipe.shared_with_ids


def matches_tag(recipe: RecipeLike, tag: str) -> bool:
    return _contains(recipe.cuisine_type, tag) or any(
        _contains(ingredient, tag) for ingredient in recipe.ingredient_names
    )


def matches_filters(
    recipe: RecipeLike, filters: RecipeFilters, viewer_id: UUID,
) -> bool:
    """True if `recipe` belongs in `viewer_id`'s listing under `filters`."""
    if not is_listed_for(viewer_id, recipe):
        return False
    if filters.name and not _contains(recipe.name, filters.name):
        return False
    if filters.cuisine_type and not _contains(
        recipe.cuisine_type, filters.cuisine_type,
    ):
        return False
    if filters.ingredient and not any(
        _contains(i, filters.ingredient) for i in recipe.ingredient_names
    ):
        return False
    if filters.status is not None and recipe.status != filters.status:
        return False
    if filters.prep_time is not None and recipe.prep_time != filters.prep_time:
        return False
    if filters.tags and not any(matches_tag(recipe, t) for t in filters.tags):
        return False
    return True

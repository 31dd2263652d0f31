"""Ownership/Sharing Policy — read/update/delete eligibility for recipes.

Invariants:
    - Missing recipe short-circuits to NotFound before any role or ownership check
    - READ: owner, shared collaborator, or ADMIN
    - UPDATE/DELETE: owner or ADMIN only. Sharing NEVER grants write access
    - Pure: identity comes in as an explicit Principal, never from ambient session state
"""

from larder.core.domain_types import Principal, RecipeOperation, Role
from larder.core.errors import ErrorContext, ForbiddenError, ResourceNotFoundError
from larder.core.repository_protocols import RecipeLike


def is_owner(principal: Principal, recipe: RecipeLike) -> bool:
    return recipe.created_by_id == principal.id


def is_shared_with(principal: Principal, recipe: RecipeLike) -> bool:
    return principal.id in recipe.shared_with_ids


def can_read_recipe(principal: Principal, recipe: RecipeLike) -> bool:
    return (
        is_owner(principal, recipe)
        or is_shared_with(principal, recipe)
        or principal.role == Role.ADMIN
    )


def can_modify_recipe(principal: Principal, recipe: RecipeLike) -> bool:
    return is_owner(principal, recipe) or principal.role == Role.ADMIN


def authorize_recipe_access(
    principal: Principal,
    recipe: RecipeLike | None,
    operation: RecipeOperation,
    recipe_id: object = None,
) -> None:
    """Raise unless `principal` may perform `operation` on `recipe`."""
    if recipe is None:
        raise ResourceNotFoundError("Recipe", str(recipe_id))

    operation = RecipeOperation(operation)
    if operation == RecipeOperation.READ:
        allowed = can_read_recipe(principal, recipe)
    else:
        allowed = can_modify_recipe(principal, recipe)

    if not allowed:
        raise ForbiddenError(
            f"Not allowed to {operation.value} this recipe",
            context=ErrorContext(
                user_id=str(principal.id),
                resource_type="Recipe",
                resource_id=str(recipe.id),
            ),
        )

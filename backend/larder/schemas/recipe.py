"""Recipe Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - RecipeCreate: name >= 2, instructions >= 5, cuisine_type >= 2 (stripped),
      ingredients >= 1 non-empty entry, prep_time > 0
    - RecipeUpdate: every field optional; a field is applied iff it was sent.
      Explicit null is rejected (absence is the only "leave unchanged")
    - shared_with_ids / ingredients, when present, REPLACE the stored collections
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import (
    BaseModel, ConfigDict, Field, StringConstraints, model_validator,
)

from larder.core.domain_types import RecipeStatus
from larder.schemas.user import UserSummary


IngredientName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200),
]
RecipeName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=2, max_length=200),
]
Instructions = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=5),
]
CuisineType = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100),
]
IngredientList = Annotated[list[IngredientName], Field(min_length=1)]
PrepTime = Annotated[int, Field(gt=0, strict=True)]


class RecipeCreate(BaseModel):
    name: RecipeName
    ingredients: IngredientList
    instructions: Instructions
    cuisine_type: CuisineType
    prep_time: PrepTime
    status: RecipeStatus | None = None
    shared_with_ids: list[UUID] | None = None


class RecipeUpdate(BaseModel):
    name: RecipeName | None = None
    ingredients: IngredientList | None = None
    instructions: Instructions | None = None
    cuisine_type: CuisineType | None = None
    prep_time: PrepTime | None = None
    status: RecipeStatus | None = None
    shared_with_ids: list[UUID] | None = None

    @model_validator(mode="after")
    def reject_explicit_null(self):
        nulled = sorted(
            name for name in self.model_fields_set
            if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"fields cannot be null: {', '.join(nulled)}")
        return self

    def present_fields(self) -> dict:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class RecipeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    ingredients: list[str]
    instructions: str
    cuisine_type: str
    prep_time: int
    status: RecipeStatus
    created_by: UserSummary
    shared_with: list[UserSummary]
    created_at: datetime

    @classmethod
    def from_model(cls, recipe) -> "RecipeResponse":
        return cls(
            id=recipe.id,
            name=recipe.name,
            ingredients=recipe.ingredient_names,
            instructions=recipe.instructions,
            cuisine_type=recipe.cuisine_type,
            prep_time=recipe.prep_time,
            status=recipe.status,
            created_by=UserSummary.model_validate(recipe.created_by),
            shared_with=[
                UserSummary.model_validate(u) for u in recipe.shared_with
            ],
            created_at=recipe.created_at,
        )

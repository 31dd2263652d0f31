"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from larder.models.user import User  # noqa: F401
from larder.models.inventory_item import InventoryItem  # noqa: F401
from larder.models.recipe import Recipe, RecipeIngredient, recipe_shares  # noqa: F401

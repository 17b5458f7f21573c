"""
Food Service

Handles food CRUD operations. Every food carries its nutrient panel per
100 units (g or ml) of its serving unit.
"""

import logging
import math
from typing import Any, Dict, Iterator, Mapping, Optional

from sqlalchemy import or_

from nutristore.extensions import db
from nutristore.models import Food
from nutristore.schemas.food_schema import CreateFoodSchema, ListFoodQuerySchema, UpdateFoodSchema
from nutristore.services.db_helpers import atomic, reading
from nutristore.services.errors import NotFoundError, ValidationError
from nutristore.services.food_constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, NUTRIENT_FIELDS
from nutristore.services.food_helpers import check_nutrient_subsets, load_fields, serialize_food

logger = logging.getLogger(__name__)

create_food_schema = CreateFoodSchema()
update_food_schema = UpdateFoodSchema()
list_food_query_schema = ListFoodQuerySchema()


def _get_or_404(food_id: int) -> Food:
    food = db.session.get(Food, food_id)
    if food is None:
        raise NotFoundError(f"Food {food_id} not found")
    return food


def create_food(fields: Mapping[str, Any]) -> int:
    """
    Create a new food from a full nutrient panel.

    Args:
        fields: name, brand (optional), serving_unit and every nutrient

    Returns:
        New food ID

    Raises:
        ValidationError: For missing, unknown or out-of-range fields
    """
    values = load_fields(create_food_schema, fields)
    check_nutrient_subsets(values)

    with atomic() as session:
        food = Food(**values)
        session.add(food)
        session.flush()
        food_id = food.food_id

    logger.info(f"Created food {food_id} ({values['name']})")
    return food_id


def get_food(food_id: int) -> Dict[str, Any]:
    with reading():
        return serialize_food(_get_or_404(food_id))


def update_food(food_id: int, fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Update some or all mutable fields of a food.

    ``food_id`` and ``created_at`` cannot be changed; passing them is a
    validation error like any other unknown field.

    Returns:
        The updated food

    Raises:
        NotFoundError: If the food does not exist
        ValidationError: For invalid values, including an inconsistent merged panel
    """
    changes = load_fields(update_food_schema, fields)

    with atomic():
        food = _get_or_404(food_id)
        merged = {field: getattr(food, field) for field in NUTRIENT_FIELDS}
        merged.update({k: v for k, v in changes.items() if k in NUTRIENT_FIELDS})
        check_nutrient_subsets(merged)

        for key, value in changes.items():
            setattr(food, key, value)

    logger.info(f"Updated food {food_id}: {sorted(changes)}")
    return get_food(food_id)


def delete_food(food_id: int) -> None:
    """Delete a food together with all of its serving sizes."""
    with atomic() as session:
        food = _get_or_404(food_id)
        serving_count = len(food.serving_sizes)
        session.delete(food)

    logger.info(f"Deleted food {food_id} and {serving_count} serving size(s)")


def _escape_like(value: str) -> str:
    # Search text is matched literally, wildcards included.
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def count_foods() -> int:
    """Return the total number of foods in the store."""
    with reading():
        return db.session.query(Food).count()


class FoodListing:
    """
    A filtered view over the foods table.

    Iterating runs a fresh query each time, so a listing can be walked
    repeatedly and always reflects the current contents of the store.
    """

    _ORDERINGS = {
        "food_id": (Food.food_id,),
        "name": (Food.name, Food.food_id),
        "created_at": (Food.created_at, Food.food_id),
    }

    def __init__(
        self,
        search: Optional[str] = None,
        brand: Optional[str] = None,
        serving_unit: Optional[str] = None,
        order_by: str = "food_id",
    ):
        self.search = search
        self.brand = brand
        self.serving_unit = serving_unit
        self.order_by = order_by

    def _query(self):
        query = db.session.query(Food)

        if self.search:
            term = f"%{_escape_like(self.search)}%"
            query = query.filter(or_(
                Food.name.ilike(term, escape="\\"),
                Food.brand.ilike(term, escape="\\")
            ))

        if self.brand:
            query = query.filter(Food.brand == self.brand)

        if self.serving_unit:
            query = query.filter(Food.serving_unit == self.serving_unit)

        return query.order_by(*self._ORDERINGS[self.order_by])

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        with reading():
            foods = self._query().all()
        for food in foods:
            yield serialize_food(food)

    def count(self) -> int:
        with reading():
            return self._query().count()

    def page(self, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT) -> Dict[str, Any]:
        """
        Return one page of the listing.

        Returns:
            Dictionary with items, pagination info
        """
        if page < 1 or not 1 <= limit <= MAX_PAGE_LIMIT:
            raise ValidationError(f"page must be >= 1 and limit between 1 and {MAX_PAGE_LIMIT}")

        with reading():
            total = self._query().count()
            foods = self._query().offset((page - 1) * limit).limit(limit).all()

        return {
            "items": [serialize_food(food) for food in foods],
            "total": total,
            "page": page,
            "limit": limit,
            "pages": math.ceil(total / limit) if total else 0,
        }


def list_foods(
    search: Optional[str] = None,
    brand: Optional[str] = None,
    serving_unit: Optional[str] = None,
    order_by: Optional[str] = None,
) -> FoodListing:
    """
    List foods with optional search, filters and ordering.

    Args:
        search: Substring matched against name or brand
        brand: Exact brand
        serving_unit: "g" or "ml"
        order_by: "food_id" (default), "name" or "created_at"

    Returns:
        A restartable FoodListing; nothing is queried until it is iterated
    """
    params = {
        "search": search,
        "brand": brand,
        "serving_unit": serving_unit,
    }
    if order_by is not None:
        params["order_by"] = order_by
    query = load_fields(list_food_query_schema, params)
    return FoodListing(**query)

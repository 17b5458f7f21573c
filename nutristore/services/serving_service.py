"""
Serving Size Service

Handles the named portions of a food ("cup", "slice", "bottle"). Amounts are
in the parent food's serving unit; the store never scales nutrients itself.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from nutristore.extensions import db
from nutristore.models import Food, ServingSize
from nutristore.schemas.food_schema import ServingSizeSchema, UpdateServingSizeSchema
from nutristore.services.db_helpers import atomic, reading
from nutristore.services.errors import ConflictError, NotFoundError
from nutristore.services.food_helpers import load_fields, serialize_serving_size

logger = logging.getLogger(__name__)

serving_size_schema = ServingSizeSchema()
update_serving_size_schema = UpdateServingSizeSchema()


def _require_food(food_id: int) -> Food:
    food = db.session.get(Food, food_id)
    if food is None:
        raise NotFoundError(f"Food {food_id} not found")
    return food


def _get_or_404(serving_id: int) -> ServingSize:
    serving = db.session.get(ServingSize, serving_id)
    if serving is None:
        raise NotFoundError(f"Serving size {serving_id} not found")
    return serving


def _ensure_name_free(food_id: int, serving_name: str, serving_id: Optional[int] = None) -> None:
    query = ServingSize.query.filter_by(food_id=food_id, serving_name=serving_name)
    if serving_id is not None:
        query = query.filter(ServingSize.serving_id != serving_id)
    if query.first():
        logger.warning(f"Serving name {serving_name!r} already used by food {food_id}")
        raise ConflictError(f"Food {food_id} already has a serving named {serving_name!r}")


def add_serving_size(food_id: int, serving_name: str, serving_amount: float) -> int:
    """
    Add a named serving size to a food.

    Returns:
        New serving ID

    Raises:
        NotFoundError: If the food does not exist
        ValidationError: If the name is empty or the amount is not positive
        ConflictError: If the food already has a serving with this name
    """
    values = load_fields(serving_size_schema, {
        "serving_name": serving_name,
        "serving_amount": serving_amount,
    })

    # The unique constraint settles concurrent inserts the pre-check misses.
    with atomic() as session:
        _require_food(food_id)
        _ensure_name_free(food_id, values["serving_name"])
        serving = ServingSize(food_id=food_id, **values)
        session.add(serving)
        session.flush()
        serving_id = serving.serving_id

    logger.info(f"Added serving {serving_id} ({values['serving_name']}) to food {food_id}")
    return serving_id


def get_serving_size(serving_id: int) -> Dict[str, Any]:
    with reading():
        return serialize_serving_size(_get_or_404(serving_id))


def update_serving_size(serving_id: int, fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Rename a serving size and/or change its amount.

    Raises:
        NotFoundError: If the serving size does not exist
        ValidationError: For an empty name or non-positive amount
        ConflictError: If the new name is already used on the same food
    """
    changes = load_fields(update_serving_size_schema, fields)

    with atomic():
        serving = _get_or_404(serving_id)
        if "serving_name" in changes:
            _ensure_name_free(serving.food_id, changes["serving_name"], serving_id=serving_id)
        for key, value in changes.items():
            setattr(serving, key, value)

    logger.info(f"Updated serving {serving_id}: {sorted(changes)}")
    return get_serving_size(serving_id)


def delete_serving_size(serving_id: int) -> None:
    with atomic() as session:
        session.delete(_get_or_404(serving_id))

    logger.info(f"Deleted serving {serving_id}")


def list_serving_sizes(food_id: int) -> List[Dict[str, Any]]:
    """
    List the serving sizes of a food, ordered by name.

    Raises:
        NotFoundError: If the food does not exist
    """
    with reading():
        _require_food(food_id)
        servings = (
            ServingSize.query
            .filter_by(food_id=food_id)
            .order_by(ServingSize.serving_name)
            .all()
        )
        return [serialize_serving_size(s) for s in servings]

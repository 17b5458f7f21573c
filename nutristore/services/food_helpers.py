"""
Food Helper Functions

Contains utility functions shared by the food and serving services:
- Schema loading with store errors
- Nutrient panel checks
- Record serialization
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from marshmallow import Schema
from marshmallow import ValidationError as SchemaValidationError

from nutristore.models import Food, ServingSize
from nutristore.services.errors import ValidationError
from nutristore.services.food_constants import NUTRIENT_FIELDS, NUTRIENT_SUBSETS


def load_fields(schema: Schema, data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Validate raw input against a schema.

    Raises:
        ValidationError: With the per-field messages from the schema
    """
    try:
        return schema.load(data if data is not None else {})
    except SchemaValidationError as e:
        raise ValidationError("Invalid input", messages=e.normalized_messages()) from e


def check_nutrient_subsets(values: Mapping[str, float]) -> None:
    """Reject panels where a sub-nutrient exceeds its parent (e.g. sugars > carbs)."""
    errors = {}
    for part, whole in NUTRIENT_SUBSETS:
        if values[part] > values[whole]:
            errors[part] = [f"Must not exceed {whole}."]
    if errors:
        raise ValidationError("Inconsistent nutrient values", messages=errors)


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    # Timestamps are written in UTC; some backends hand them back naive.
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def serialize_food(food: Food) -> Dict[str, Any]:
    data = {
        "food_id": food.food_id,
        "name": food.name,
        "brand": food.brand,
        "serving_unit": food.serving_unit,
    }
    for field in NUTRIENT_FIELDS:
        data[field] = float(getattr(food, field))
    data["created_at"] = isoformat_utc(food.created_at)
    return data


def serialize_serving_size(serving: ServingSize) -> Dict[str, Any]:
    return {
        "serving_id": serving.serving_id,
        "food_id": serving.food_id,
        "serving_name": serving.serving_name,
        "serving_amount": float(serving.serving_amount),
        "created_at": isoformat_utc(serving.created_at),
    }

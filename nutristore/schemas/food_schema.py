from collections.abc import Mapping

from marshmallow import Schema, fields, pre_load, validate

from nutristore.services.food_constants import FOOD_ORDERINGS
from nutristore.utils.enums import ServingUnit

UNIT_VALUES = [e.value for e in ServingUnit]
NON_NEGATIVE = validate.Range(min=0)
POSITIVE = validate.Range(min=0, min_inclusive=False)


class _TrimmedSchema(Schema):
    """Strips surrounding whitespace from string inputs before validation."""

    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, Mapping):
            return data
        return {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}


class _FoodFieldsSchema(_TrimmedSchema):
    """Stores a blank brand as None, marking a generic food."""

    @pre_load
    def blank_brand_is_generic(self, data, **kwargs):
        brand = data.get("brand") if isinstance(data, Mapping) else None
        if isinstance(brand, str) and not brand.strip():
            data = dict(data, brand=None)
        return data


class CreateFoodSchema(_FoodFieldsSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1))
    brand = fields.Str(allow_none=True, load_default=None)
    serving_unit = fields.Str(required=True, validate=validate.OneOf(UNIT_VALUES))
    energy = fields.Float(required=True, validate=NON_NEGATIVE)
    protein = fields.Float(required=True, validate=NON_NEGATIVE)
    fat = fields.Float(required=True, validate=NON_NEGATIVE)
    fat_saturated = fields.Float(required=True, validate=NON_NEGATIVE)
    carbs = fields.Float(required=True, validate=NON_NEGATIVE)
    carbs_sugars = fields.Float(required=True, validate=NON_NEGATIVE)
    fibre = fields.Float(required=True, validate=NON_NEGATIVE)
    sodium = fields.Float(required=True, validate=NON_NEGATIVE)


class UpdateFoodSchema(_FoodFieldsSchema):
    name = fields.Str(validate=validate.Length(min=1))
    brand = fields.Str(allow_none=True)
    serving_unit = fields.Str(validate=validate.OneOf(UNIT_VALUES))
    energy = fields.Float(validate=NON_NEGATIVE)
    protein = fields.Float(validate=NON_NEGATIVE)
    fat = fields.Float(validate=NON_NEGATIVE)
    fat_saturated = fields.Float(validate=NON_NEGATIVE)
    carbs = fields.Float(validate=NON_NEGATIVE)
    carbs_sugars = fields.Float(validate=NON_NEGATIVE)
    fibre = fields.Float(validate=NON_NEGATIVE)
    sodium = fields.Float(validate=NON_NEGATIVE)


class ServingSizeSchema(_TrimmedSchema):
    serving_name = fields.Str(required=True, validate=validate.Length(min=1))
    serving_amount = fields.Float(required=True, validate=POSITIVE)


class UpdateServingSizeSchema(_TrimmedSchema):
    serving_name = fields.Str(validate=validate.Length(min=1))
    serving_amount = fields.Float(validate=POSITIVE)


class ListFoodQuerySchema(_TrimmedSchema):
    search = fields.Str(allow_none=True, load_default=None)
    brand = fields.Str(allow_none=True, load_default=None)
    serving_unit = fields.Str(allow_none=True, load_default=None, validate=validate.OneOf(UNIT_VALUES))
    order_by = fields.Str(load_default="food_id", validate=validate.OneOf(FOOD_ORDERINGS))

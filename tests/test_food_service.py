import math
from datetime import datetime, timedelta, timezone

import pytest

from nutristore import open_store
from nutristore.extensions import db
from nutristore.models import Food, ServingSize
from nutristore.services.db_helpers import atomic
from nutristore.services.errors import NotFoundError, StorageError, ValidationError
from nutristore.services.food_service import (
    count_foods,
    create_food,
    delete_food,
    get_food,
    list_foods,
    update_food,
)


def test_create_then_get_returns_input_plus_id_and_timestamp(app, almond_milk):
    food_id = create_food(almond_milk)
    food = get_food(food_id)

    assert food["food_id"] == food_id
    created_at = food.pop("created_at")
    assert datetime.fromisoformat(created_at).tzinfo is not None
    food.pop("food_id")
    assert food == almond_milk


def test_food_ids_are_unique(app, almond_milk, banana):
    assert create_food(almond_milk) != create_food(banana)


def test_generic_food_has_no_brand(app, banana):
    food_id = create_food(banana)
    assert get_food(food_id)["brand"] is None


def test_blank_brand_is_stored_as_none(app, banana):
    food_id = create_food(dict(banana, brand="   "))
    assert get_food(food_id)["brand"] is None


def test_brand_may_be_omitted(app, banana):
    fields = dict(banana)
    del fields["brand"]
    assert get_food(create_food(fields))["brand"] is None


def test_name_is_trimmed(app, banana):
    food_id = create_food(dict(banana, name="  Banana  "))
    assert get_food(food_id)["name"] == "Banana"


@pytest.mark.parametrize("name", ["", "   ", None])
def test_name_is_required(app, banana, name):
    with pytest.raises(ValidationError) as exc:
        create_food(dict(banana, name=name))
    assert "name" in exc.value.messages


def test_negative_energy_is_rejected(app, banana):
    with pytest.raises(ValidationError) as exc:
        create_food(dict(banana, energy=-1))
    assert "energy" in exc.value.messages


def test_zero_energy_is_accepted(app, banana):
    food_id = create_food(dict(banana, energy=0))
    assert get_food(food_id)["energy"] == 0


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_nutrients_are_rejected(app, banana, value):
    with pytest.raises(ValidationError):
        create_food(dict(banana, protein=value))


def test_non_numeric_nutrient_is_rejected(app, banana):
    with pytest.raises(ValidationError) as exc:
        create_food(dict(banana, sodium="lots"))
    assert "sodium" in exc.value.messages


def test_unknown_unit_is_rejected(app, banana):
    with pytest.raises(ValidationError) as exc:
        create_food(dict(banana, serving_unit="oz"))
    assert "serving_unit" in exc.value.messages


@pytest.mark.parametrize("unit", ["g", "ml"])
def test_known_units_are_accepted(app, banana, unit):
    food_id = create_food(dict(banana, serving_unit=unit))
    assert get_food(food_id)["serving_unit"] == unit


def test_missing_nutrient_is_rejected(app, banana):
    fields = dict(banana)
    del fields["fibre"]
    with pytest.raises(ValidationError) as exc:
        create_food(fields)
    assert "fibre" in exc.value.messages
    assert count_foods() == 0


def test_client_cannot_choose_id_or_timestamp(app, banana):
    with pytest.raises(ValidationError):
        create_food(dict(banana, food_id=99))
    with pytest.raises(ValidationError):
        create_food(dict(banana, created_at="2020-01-01T00:00:00"))


def test_sugars_cannot_exceed_carbs(app, banana):
    with pytest.raises(ValidationError) as exc:
        create_food(dict(banana, carbs=5, carbs_sugars=6))
    assert "carbs_sugars" in exc.value.messages


def test_saturated_fat_cannot_exceed_fat(app, banana):
    with pytest.raises(ValidationError) as exc:
        create_food(dict(banana, fat=0.3, fat_saturated=0.5))
    assert "fat_saturated" in exc.value.messages


def test_get_missing_food(app):
    with pytest.raises(NotFoundError):
        get_food(12345)


def test_repeated_reads_are_identical(app, almond_milk):
    food_id = create_food(almond_milk)
    assert get_food(food_id) == get_food(food_id) == get_food(food_id)


def test_partial_update(app, almond_milk):
    food_id = create_food(almond_milk)
    before = get_food(food_id)

    after = update_food(food_id, {"energy": 24, "brand": None})

    assert after["energy"] == 24
    assert after["brand"] is None
    assert after["name"] == before["name"]
    assert after["created_at"] == before["created_at"]
    assert get_food(food_id) == after


def test_update_missing_food(app):
    with pytest.raises(NotFoundError):
        update_food(404, {"energy": 1})


def test_update_validates_changed_fields(app, banana):
    food_id = create_food(banana)
    with pytest.raises(ValidationError):
        update_food(food_id, {"serving_unit": "cup"})
    with pytest.raises(ValidationError):
        update_food(food_id, {"fat": -0.1})
    with pytest.raises(ValidationError):
        update_food(food_id, {"name": ""})
    assert get_food(food_id)["serving_unit"] == "g"


def test_update_rejects_immutable_fields(app, banana):
    food_id = create_food(banana)
    with pytest.raises(ValidationError):
        update_food(food_id, {"created_at": "2001-01-01T00:00:00"})
    with pytest.raises(ValidationError):
        update_food(food_id, {"food_id": food_id + 1})


def test_update_checks_merged_panel(app, banana):
    food_id = create_food(banana)
    # sugars stay at 12.2, so carbs may not drop below that
    with pytest.raises(ValidationError):
        update_food(food_id, {"carbs": 10})
    assert get_food(food_id)["carbs"] == banana["carbs"]

    updated = update_food(food_id, {"carbs": 10, "carbs_sugars": 9})
    assert updated["carbs"] == 10
    assert updated["carbs_sugars"] == 9


def test_delete_food(app, banana):
    food_id = create_food(banana)
    delete_food(food_id)

    with pytest.raises(NotFoundError):
        get_food(food_id)
    with pytest.raises(NotFoundError):
        delete_food(food_id)


def test_count_foods(app, banana, almond_milk):
    assert count_foods() == 0
    create_food(banana)
    create_food(almond_milk)
    assert count_foods() == 2


def test_list_foods_is_lazy_and_restartable(app, banana, almond_milk):
    listing = list_foods(order_by="name")
    assert list(listing) == []

    create_food(banana)
    create_food(almond_milk)

    first = [f["name"] for f in listing]
    second = [f["name"] for f in listing]
    assert first == second == ["Almond Milk", "Banana"]


def test_list_foods_filters(app, banana, almond_milk):
    create_food(banana)
    create_food(almond_milk)
    create_food(dict(almond_milk, name="Oat Milk", brand="Other"))

    assert [f["name"] for f in list_foods(serving_unit="g")] == ["Banana"]
    assert [f["name"] for f in list_foods(search="milk", order_by="name")] == ["Almond Milk", "Oat Milk"]
    assert [f["name"] for f in list_foods(search="acme")] == ["Almond Milk"]
    assert [f["name"] for f in list_foods(brand="Other")] == ["Oat Milk"]
    assert list_foods(serving_unit="ml").count() == 2


def test_list_foods_rejects_bad_arguments(app):
    with pytest.raises(ValidationError):
        list_foods(order_by="energy")
    with pytest.raises(ValidationError):
        list_foods(serving_unit="oz")


def test_list_foods_pages(app, banana):
    for i in range(5):
        create_food(dict(banana, name=f"Banana {i}"))

    page = list_foods(order_by="name").page(page=2, limit=2)

    assert page["total"] == 5
    assert page["pages"] == 3
    assert [f["name"] for f in page["items"]] == ["Banana 2", "Banana 3"]

    with pytest.raises(ValidationError):
        list_foods().page(page=0)


def test_database_rejects_unknown_unit(app, banana):
    # Bypasses the schema to exercise the CHECK constraint
    fields = dict(banana, serving_unit="oz")
    with pytest.raises(ValidationError):
        with atomic() as session:
            session.add(Food(**fields))
    assert db.session.query(Food).count() == 0


def test_created_at_is_stored_with_time_zone():
    assert Food.__table__.c.created_at.type.timezone is True
    assert ServingSize.__table__.c.created_at.type.timezone is True


def test_created_at_is_current_utc_time(app, banana):
    before = datetime.now(timezone.utc)
    created_at = datetime.fromisoformat(get_food(create_food(banana))["created_at"])

    assert created_at.utcoffset() == timedelta(0)
    assert before - timedelta(seconds=5) <= created_at <= datetime.now(timezone.utc) + timedelta(seconds=5)


def test_update_blank_brand_makes_food_generic(app, almond_milk):
    food_id = create_food(almond_milk)
    assert update_food(food_id, {"brand": "  "})["brand"] is None


def test_search_matches_wildcards_literally(app, banana):
    create_food(dict(banana, name="100% Juice"))
    create_food(dict(banana, name="Apple Juice"))
    create_food(dict(banana, name="Rice_Cake"))
    create_food(dict(banana, name="Rice Cake"))

    assert [f["name"] for f in list_foods(search="%")] == ["100% Juice"]
    assert [f["name"] for f in list_foods(search="_")] == ["Rice_Cake"]
    assert [f["name"] for f in list_foods(search="rice_c")] == ["Rice_Cake"]


def test_list_foods_default_page_size(app, banana):
    for i in range(12):
        create_food(dict(banana, name=f"Banana {i:02d}"))

    page = list_foods(order_by="name").page()

    assert page["limit"] == 10
    assert len(page["items"]) == 10
    assert page["pages"] == 2


def test_missing_schema_raises_storage_error(banana):
    with open_store({"SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:"}):
        with pytest.raises(StorageError):
            get_food(1)
        with pytest.raises(StorageError):
            create_food(banana)
        with pytest.raises(StorageError):
            list(list_foods())

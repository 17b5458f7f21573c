import pytest

from nutristore import open_store

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "SQLALCHEMY_TRACK_MODIFICATIONS": False,
}


@pytest.fixture()
def app():
    # A fresh in-memory database per test
    with open_store(TEST_CONFIG, create_schema=True) as app:
        yield app


@pytest.fixture()
def almond_milk():
    return {
        "name": "Almond Milk",
        "brand": "Acme",
        "serving_unit": "ml",
        "energy": 17,
        "protein": 0.6,
        "fat": 1.2,
        "fat_saturated": 0.1,
        "carbs": 0.3,
        "carbs_sugars": 0.3,
        "fibre": 0.2,
        "sodium": 40,
    }


@pytest.fixture()
def banana():
    return {
        "name": "Banana",
        "brand": None,
        "serving_unit": "g",
        "energy": 89,
        "protein": 1.1,
        "fat": 0.3,
        "fat_saturated": 0.1,
        "carbs": 20.2,
        "carbs_sugars": 12.2,
        "fibre": 2.6,
        "sodium": 1,
    }

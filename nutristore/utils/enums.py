from enum import Enum

class ServingUnit(str, Enum):
    GRAMS = "g"
    MILLILITERS = "ml"

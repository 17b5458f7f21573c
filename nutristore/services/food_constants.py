"""
Food Store Constants

Contains the constants shared by the models, schemas and services.
"""

# Nutrient values are always expressed per this many units of the food's serving unit
REFERENCE_AMOUNT = 100

# Nutrient panel columns, in display order
NUTRIENT_FIELDS = (
    "energy",         # kcal
    "protein",        # g
    "fat",            # g
    "fat_saturated",  # g
    "carbs",          # g, excluding fibre
    "carbs_sugars",   # g
    "fibre",          # g
    "sodium",         # mg
)

# (part, whole) pairs where the part can never exceed the whole
NUTRIENT_SUBSETS = (
    ("fat_saturated", "fat"),
    ("carbs_sugars", "carbs"),
)

# Orderings accepted by list_foods
FOOD_ORDERINGS = ("food_id", "name", "created_at")

# Pagination defaults
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100

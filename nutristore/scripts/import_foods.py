import csv
import logging
import sys

from nutristore import create_app
from nutristore.models import Food
from nutristore.services.errors import ValidationError
from nutristore.services.food_constants import NUTRIENT_FIELDS
from nutristore.services.food_service import create_food, update_food

logger = logging.getLogger(__name__)

COLUMNS = ("name", "brand", "serving_unit") + NUTRIENT_FIELDS


def _find_existing(name, brand):
    return Food.query.filter_by(name=name, brand=brand or None).first()


def import_foods(csv_path):
    """
    Create or update foods from a CSV file.

    Rows are matched to existing foods by (name, brand). Rows that fail
    validation are reported and skipped.

    Returns:
        (added, updated, skipped) counts
    """
    added_count = 0
    updated_count = 0
    skipped_count = 0

    with open(csv_path, 'r', encoding='utf-8', newline='') as f:
        reader = csv.DictReader(f)
        missing = [c for c in COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise ValidationError(f"CSV is missing columns: {', '.join(missing)}")

        for line_no, row in enumerate(reader, start=2):
            fields = {c: row[c] for c in COLUMNS}
            name = (fields["name"] or "").strip()
            brand = (fields["brand"] or "").strip()

            try:
                existing = _find_existing(name, brand)
                if existing:
                    update_food(existing.food_id, fields)
                    updated_count += 1
                    print(f"Updated: {name}")
                else:
                    create_food(fields)
                    added_count += 1
                    print(f"Added: {name}")
            except ValidationError as e:
                skipped_count += 1
                logger.warning(f"Skipping line {line_no} ({name or '?'}): {e.messages or e.message}")

    return added_count, updated_count, skipped_count


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: python -m nutristore.scripts.import_foods <foods.csv>")
        return 2

    app = create_app()
    with app.app_context():
        print("Starting food import...")
        added, updated, skipped = import_foods(argv[0])
        print("\nImport complete!")
        print(f"Added: {added}")
        print(f"Updated: {updated}")
        print(f"Skipped: {skipped}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

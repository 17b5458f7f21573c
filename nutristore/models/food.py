from datetime import datetime, timezone

from nutristore.extensions import db
from nutristore.services.food_constants import NUTRIENT_FIELDS
from nutristore.utils.enums import ServingUnit


def _utc_now():
    return datetime.now(timezone.utc)


_UNIT_VALUES = ", ".join(f"'{unit.value}'" for unit in ServingUnit)


class Food(db.Model):
    """A food item. Nutrients are given per 100 g or 100 ml of ``serving_unit``."""

    __tablename__ = "foods"

    food_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.Text, nullable=False)
    brand = db.Column(db.Text, nullable=True)  # None for generic foods
    serving_unit = db.Column(db.Text, nullable=False)

    energy = db.Column(db.Float, nullable=False)         # kcal
    protein = db.Column(db.Float, nullable=False)        # g
    fat = db.Column(db.Float, nullable=False)            # g
    fat_saturated = db.Column(db.Float, nullable=False)  # g
    carbs = db.Column(db.Float, nullable=False)          # g, excluding fibre
    carbs_sugars = db.Column(db.Float, nullable=False)   # g
    fibre = db.Column(db.Float, nullable=False)          # g
    sodium = db.Column(db.Float, nullable=False)         # mg

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utc_now)

    serving_sizes = db.relationship(
        "ServingSize",
        back_populates="food",
        cascade="all, delete-orphan",
        order_by="ServingSize.serving_name",
    )

    __table_args__ = (
        db.CheckConstraint(f"serving_unit IN ({_UNIT_VALUES})", name="ck_foods_serving_unit"),
        db.CheckConstraint("length(name) > 0", name="ck_foods_name_not_empty"),
        *(
            db.CheckConstraint(f"{field} >= 0", name=f"ck_foods_{field}_non_negative")
            for field in NUTRIENT_FIELDS
        ),
    )

    def __repr__(self):
        return f"<Food {self.food_id} {self.name}>"

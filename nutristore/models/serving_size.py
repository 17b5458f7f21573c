from datetime import datetime, timezone

from nutristore.extensions import db


class ServingSize(db.Model):
    """A named portion of a food, measured in the food's ``serving_unit``."""

    __tablename__ = "serving_sizes"

    serving_id = db.Column(db.Integer, primary_key=True)
    food_id = db.Column(
        db.Integer,
        db.ForeignKey("foods.food_id", ondelete="CASCADE"),
        nullable=False,
    )
    serving_name = db.Column(db.Text, nullable=False)  # e.g. "bottle", "cup", "slice"
    serving_amount = db.Column(db.Float, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=True, default=lambda: datetime.now(timezone.utc))

    food = db.relationship("Food", back_populates="serving_sizes")

    __table_args__ = (
        db.UniqueConstraint("food_id", "serving_name", name="uq_serving_sizes_food_name"),
        db.CheckConstraint("serving_amount > 0", name="ck_serving_sizes_amount_positive"),
        db.CheckConstraint("length(serving_name) > 0", name="ck_serving_sizes_name_not_empty"),
    )

    def __repr__(self):
        return f"<ServingSize {self.serving_name} {self.serving_amount} of food {self.food_id}>"

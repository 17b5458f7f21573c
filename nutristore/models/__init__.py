from .food import Food
from .serving_size import ServingSize

__all__ = ["Food", "ServingSize"]

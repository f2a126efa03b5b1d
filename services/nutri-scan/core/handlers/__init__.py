"""
Route handlers for the Nutri Scan endpoints.
"""

from .food_recognition import handle_food_recognition
from .n_score import handle_n_score

__all__ = [
    "handle_food_recognition",
    "handle_n_score",
]

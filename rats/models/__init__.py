"""
Beanie document models.

Registered with init_beanie so their indexes exist before requests are served.
"""

from rats.models.user import User
from rats.models.nutrition import NutritionProfile, NutritionBehavior
from rats.models.wellness import WellnessLog

DOCUMENT_MODELS = [User, NutritionProfile, NutritionBehavior, WellnessLog]

__all__ = [
    "User",
    "NutritionProfile",
    "NutritionBehavior",
    "WellnessLog",
    "DOCUMENT_MODELS",
]

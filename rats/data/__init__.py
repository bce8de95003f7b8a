"""Static seed data for the RATS catalogue collections."""

from rats.data.meditation_seeds import (
    MEDITATION_SEEDS,
    SLEEP_CONTENT_SEEDS,
    build_course_seeds,
    seed_meditation_data,
)

__all__ = [
    "MEDITATION_SEEDS",
    "SLEEP_CONTENT_SEEDS",
    "build_course_seeds",
    "seed_meditation_data",
]

"""
Meditation catalogue seed data.

Meditations, courses and sleep content inserted into empty collections
by scripts/seed_meditation.py. Courses reference meditations by id, so
they are built from the inserted meditation documents.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)

AUDIO_BASE_URL = "https://example.com/audio"
IMAGE_BASE_URL = "https://example.com/images"


def _media(slug: str) -> Dict[str, str]:
    return {
        "audioUrl": f"{AUDIO_BASE_URL}/{slug}.mp3",
        "imageUrl": f"{IMAGE_BASE_URL}/{slug}.jpg",
    }


MEDITATION_SEEDS: List[Dict[str, Any]] = [
    {
        "title": "Morning Mindfulness",
        "description": "Start your day with clarity and purpose. This meditation helps you set positive intentions for the day ahead.",
        **_media("morning-mindfulness"),
        "duration": 5,
        "category": "focus",
        "level": "beginner",
        "tags": ["morning", "mindfulness", "clarity"],
        "isFeatured": True,
        "isDownloadable": True,
        "isPremium": False,
    },
    {
        "title": "Anxiety Relief",
        "description": "A gentle meditation to help calm anxiety and find your center during stressful moments.",
        **_media("anxiety-relief"),
        "duration": 10,
        "category": "anxiety",
        "level": "beginner",
        "tags": ["anxiety", "stress", "calm"],
        "isFeatured": True,
        "isDownloadable": True,
        "isPremium": False,
    },
    {
        "title": "Deep Focus",
        "description": "Enhance your concentration and productivity with this focused attention meditation.",
        **_media("deep-focus"),
        "duration": 15,
        "category": "focus",
        "level": "intermediate",
        "tags": ["focus", "concentration", "productivity"],
        "isFeatured": False,
        "isDownloadable": True,
        "isPremium": False,
    },
    {
        "title": "Loving-Kindness",
        "description": "Cultivate compassion for yourself and others with this heart-centered meditation.",
        **_media("loving-kindness"),
        "duration": 10,
        "category": "love",
        "level": "beginner",
        "tags": ["compassion", "love", "kindness"],
        "isFeatured": False,
        "isDownloadable": True,
        "isPremium": False,
    },
    {
        "title": "Sleep Preparation",
        "description": "Prepare your mind and body for restful sleep with this calming bedtime meditation.",
        **_media("sleep-prep"),
        "duration": 20,
        "category": "sleep",
        "level": "beginner",
        "tags": ["sleep", "relaxation", "bedtime"],
        "isFeatured": True,
        "isDownloadable": True,
        "isPremium": False,
    },
    {
        "title": "Advanced Body Scan",
        "description": "A detailed progressive relaxation meditation that guides you through each part of your body.",
        **_media("body-scan"),
        "duration": 25,
        "category": "calm",
        "level": "advanced",
        "tags": ["body scan", "relaxation", "awareness"],
        "isFeatured": False,
        "isDownloadable": True,
        "isPremium": True,
    },
    {
        "title": "Forgiveness Practice",
        "description": "Learn to let go of resentment and cultivate forgiveness toward yourself and others.",
        **_media("forgiveness"),
        "duration": 15,
        "category": "forgiveness",
        "level": "intermediate",
        "tags": ["forgiveness", "healing", "letting go"],
        "isFeatured": False,
        "isDownloadable": True,
        "isPremium": True,
    },
    {
        "title": "Quick Calm",
        "description": "A brief meditation for moments when you need to quickly center yourself.",
        **_media("quick-calm"),
        "duration": 3,
        "category": "calm",
        "level": "beginner",
        "tags": ["quick", "calm", "reset"],
        "isFeatured": True,
        "isDownloadable": True,
        "isPremium": False,
    },
]


SLEEP_CONTENT_SEEDS: List[Dict[str, Any]] = [
    {
        "title": "Rainy Night",
        "description": "Gentle rainfall sounds to help you drift off to sleep peacefully.",
        "type": "soundscape",
        **_media("rainy-night"),
        "duration": 45,
        "category": "sleep",
        "tags": ["rain", "nature", "sleep"],
        "isPremium": False,
        "isDownloadable": True,
    },
    {
        "title": "Ocean Waves",
        "description": "The rhythmic sound of ocean waves to lull you into a deep sleep.",
        "type": "soundscape",
        **_media("ocean-waves"),
        "duration": 60,
        "category": "sleep",
        "tags": ["ocean", "waves", "water"],
        "isPremium": False,
        "isDownloadable": True,
    },
    {
        "title": "The Enchanted Forest",
        "description": "A calming bedtime story that takes you on a journey through a magical forest.",
        "type": "story",
        **_media("enchanted-forest"),
        "duration": 30,
        "category": "sleep",
        "tags": ["story", "fantasy", "sleep"],
        "isPremium": True,
        "isDownloadable": True,
    },
    {
        "title": "Evening Wind Chimes",
        "description": "Soft wind chimes creating a peaceful atmosphere for relaxation and sleep.",
        "type": "soundscape",
        **_media("wind-chimes"),
        "duration": 40,
        "category": "relaxation",
        "tags": ["chimes", "wind", "peaceful"],
        "isPremium": False,
        "isDownloadable": True,
    },
    {
        "title": "Gentle Piano Lullaby",
        "description": "Soft piano melodies to help you unwind and prepare for sleep.",
        "type": "soundscape",
        **_media("piano-lullaby"),
        "duration": 35,
        "category": "sleep",
        "tags": ["piano", "music", "lullaby"],
        "isPremium": False,
        "isDownloadable": True,
    },
    {
        "title": "The Starry Night Journey",
        "description": "A guided visualization story that takes you on a peaceful journey through the night sky.",
        "type": "story",
        **_media("starry-night"),
        "duration": 25,
        "category": "sleep",
        "tags": ["stars", "night", "visualization"],
        "isPremium": True,
        "isDownloadable": True,
    },
    {
        "title": "Twilight Forest Sounds",
        "description": "The natural ambience of a forest at dusk with gentle wildlife sounds.",
        "type": "soundscape",
        **_media("forest-sounds"),
        "duration": 50,
        "category": "relaxation",
        "tags": ["forest", "nature", "wildlife"],
        "isPremium": False,
        "isDownloadable": True,
    },
    {
        "title": "Bedtime Wind Down",
        "description": "A guided relaxation session designed to prepare your body and mind for sleep.",
        "type": "story",
        **_media("wind-down"),
        "duration": 15,
        "category": "wind-down",
        "tags": ["relaxation", "bedtime", "wind-down"],
        "isPremium": False,
        "isDownloadable": True,
    },
]


def build_course_seeds(meditations: List[dict]) -> List[Dict[str, Any]]:
    """
    Build course documents grouped from the given meditation documents.

    Args:
        meditations: Meditation documents with their _id set

    Returns:
        Course documents ready for insertion
    """
    by_level = {
        level: [m for m in meditations if m.get("level") == level]
        for level in ("beginner", "intermediate", "advanced")
    }
    beginner = by_level["beginner"]

    return [
        {
            "title": "Meditation Fundamentals",
            "description": "A comprehensive introduction to meditation for beginners. Learn the essential techniques to start your practice.",
            "imageUrl": f"{IMAGE_BASE_URL}/meditation-fundamentals.jpg",
            "level": "beginner",
            "totalSessions": 5,
            "meditations": [m["_id"] for m in beginner[:5]],
            "isPremium": False,
        },
        {
            "title": "Anxiety Management",
            "description": "A targeted course to help you manage anxiety and stress through meditation and mindfulness.",
            "imageUrl": f"{IMAGE_BASE_URL}/anxiety-management.jpg",
            "level": "beginner",
            "totalSessions": 3,
            "meditations": [m["_id"] for m in beginner if m.get("category") in ("anxiety", "calm")],
            "isPremium": False,
        },
        {
            "title": "Advanced Mindfulness",
            "description": "Deepen your practice with advanced meditation techniques for experienced practitioners.",
            "imageUrl": f"{IMAGE_BASE_URL}/advanced-mindfulness.jpg",
            "level": "advanced",
            "totalSessions": 2,
            "meditations": [m["_id"] for m in by_level["advanced"]],
            "isPremium": True,
        },
        {
            "title": "Emotional Balance",
            "description": "Learn to navigate difficult emotions and cultivate emotional resilience through meditation.",
            "imageUrl": f"{IMAGE_BASE_URL}/emotional-balance.jpg",
            "level": "intermediate",
            "totalSessions": 4,
            "meditations": [m["_id"] for m in by_level["intermediate"]],
            "isPremium": True,
        },
    ]


def _stamped(docs: List[Dict[str, Any]], now: datetime) -> List[Dict[str, Any]]:
    return [{**doc, "createdAt": now, "updatedAt": now} for doc in docs]


async def seed_meditation_data(db: AsyncIOMotorDatabase) -> Dict[str, int]:
    """
    Insert the catalogue into each collection that is still empty.

    Collections that already hold documents are left untouched.

    Returns:
        Number of documents inserted per collection
    """
    now = datetime.now(timezone.utc)
    inserted = {"meditations": 0, "meditationCourses": 0, "sleepContent": 0}

    meditations = db["meditations"]
    if await meditations.count_documents({}) == 0:
        result = await meditations.insert_many(_stamped(MEDITATION_SEEDS, now))
        inserted["meditations"] = len(result.inserted_ids)
        logger.info(f"{inserted['meditations']} meditations created")
    else:
        logger.info("Meditations already seeded")

    courses = db["meditationCourses"]
    if await courses.count_documents({}) == 0:
        meditation_docs = await meditations.find({}, {"level": 1, "category": 1}).to_list(length=None)
        result = await courses.insert_many(_stamped(build_course_seeds(meditation_docs), now))
        inserted["meditationCourses"] = len(result.inserted_ids)
        logger.info(f"{inserted['meditationCourses']} meditation courses created")
    else:
        logger.info("Meditation courses already seeded")

    sleep_content = db["sleepContent"]
    if await sleep_content.count_documents({}) == 0:
        result = await sleep_content.insert_many(_stamped(SLEEP_CONTENT_SEEDS, now))
        inserted["sleepContent"] = len(result.inserted_ids)
        logger.info(f"{inserted['sleepContent']} sleep content items created")
    else:
        logger.info("Sleep content already seeded")

    return inserted

#!/usr/bin/env python3
"""
Seed script for the meditation catalogue.

This script:
1. Inserts the meditation library if the 'meditations' collection is empty
2. Builds courses from the stored meditations if 'meditationCourses' is empty
3. Inserts sleep content if 'sleepContent' is empty

Usage:
    python scripts/seed_meditation.py

Environment variables required:
    MONGODB_URI - MongoDB connection string
    MONGODB_DATABASE - Database name (default: rats)
"""

import asyncio
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from motor.motor_asyncio import AsyncIOMotorClient
from dotenv import load_dotenv

from rats.data import seed_meditation_data

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


async def seed():
    """Seed every empty catalogue collection."""
    mongodb_uri = os.getenv("MONGODB_URI")
    database_name = os.getenv("MONGODB_DATABASE", "rats")

    if not mongodb_uri:
        print("ERROR: MONGODB_URI environment variable not set")
        sys.exit(1)

    print(f"Connecting to database: {database_name}")
    client = AsyncIOMotorClient(mongodb_uri, tz_aware=True)

    try:
        inserted = await seed_meditation_data(client[database_name])
    finally:
        client.close()

    print("\n=== Meditation Seed Results ===")
    for collection, count in inserted.items():
        print(f"{collection}: {count} inserted")


if __name__ == "__main__":
    asyncio.run(seed())

"""
RATS wellness API.

Calorie tracking, meditation, nutrition coaching, event reminders and
community features on FastAPI + MongoDB.
"""

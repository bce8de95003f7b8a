"""
AI content for events.

Generates a personalized greeting and a celebration plan for an event.
When the AI provider is missing or fails, a per-event-type template is used.
"""

import logging
from typing import Optional, Tuple

from common.ai.base import AIProvider, AIProviderError

logger = logging.getLogger(__name__)


MESSAGE_PROMPT = """Write a warm, personalized message for a {event_type} for {name} who is my {relation}.
The message should be heartfelt, specific to our relationship, and appropriate for sharing on social media.
Keep it under 150 words and make it sound natural and personal, not generic.
{notes}
Format the message nicely with appropriate emojis and line breaks."""

PLAN_PROMPT = """Create a special plan for celebrating a {event_type} with {name} who is my {relation}.
Suggest 3-5 thoughtful ideas that would make this occasion memorable and special.
Include a mix of activities, gift ideas, and ways to make the day unique.
{notes}
Format the suggestions in a clear, easy-to-read list with brief explanations for each idea.
Include appropriate emojis and make the suggestions specific and personalized, not generic."""


FALLBACK_MESSAGES = {
    "birthday": (
        "Happy Birthday, {name}! 🎂\n\n"
        "Wishing you a wonderful day filled with joy and happiness. It's been amazing having you "
        "as my {relation}, and I hope this year brings you everything you wish for.\n\n"
        "Enjoy your special day! 🎉"
    ),
    "anniversary": (
        "Happy Anniversary, {name}! 💍\n\n"
        "Celebrating another year of wonderful memories with you, my amazing {relation}. "
        "Here's to many more years of happiness together!\n\n"
        "With love and appreciation, today and always. ❤️"
    ),
    "holiday": (
        "Happy Holidays, {name}! 🎄\n\n"
        "Sending warm wishes to my wonderful {relation} during this special season. "
        "May your days be merry and bright!\n\n"
        "Looking forward to creating more memories together. ✨"
    ),
    "other": (
        "Thinking of you, {name}! 💫\n\n"
        "Just wanted to send a special message to my amazing {relation}. You mean so much to me, "
        "and I'm grateful to have you in my life.\n\n"
        "Have a wonderful day! 🌟"
    ),
}

FALLBACK_PLANS = {
    "birthday": (
        "Here are some ideas to celebrate {name}'s birthday:\n\n"
        "1. 🎁 Personalized Gift Basket - Create a custom gift basket with {name}'s favorite things. "
        "Include snacks, small gifts, and a heartfelt card.\n\n"
        "2. 🍽️ Special Meal - Either cook their favorite meal at home or make reservations at a "
        "restaurant they've been wanting to try.\n\n"
        "3. 🎂 Surprise Party - Organize a small gathering with close friends and family. "
        "Decorate with their favorite colors and themes.\n\n"
        "4. 🎬 Experience Gift - Plan a special activity like a movie night, hiking trip, or spa day "
        "based on what they enjoy.\n\n"
        "5. 📱 Video Messages - Collect video messages from friends and family who can't be there "
        "in person and compile them into one heartwarming video."
    ),
    "anniversary": (
        "Here are some ideas to celebrate your anniversary with {name}:\n\n"
        "1. 💌 Memory Lane - Create a scrapbook or digital slideshow of your favorite moments together.\n\n"
        "2. 🍷 Recreate Your First Date - Go back to where it all began and recreate your first date together.\n\n"
        "3. 🎁 Thoughtful Gift - Give a gift that represents your relationship or something they've been wanting.\n\n"
        "4. 🌟 New Experience - Try something new together like a cooking class, dance lesson, "
        "or adventure activity.\n\n"
        "5. 🌙 Romantic Getaway - Plan a weekend trip to a place you both have wanted to visit."
    ),
    "holiday": (
        "Here are some ideas to celebrate the holiday with {name}:\n\n"
        "1. 🎄 Festive Decoration - Decorate your space together with holiday-themed decorations.\n\n"
        "2. 👨‍👩‍👧‍👦 Family Gathering - Organize a special meal with traditional holiday foods "
        "and invite close family members.\n\n"
        "3. 🎁 Thoughtful Gift Exchange - Exchange meaningful gifts that show how well you know each other.\n\n"
        "4. 🍪 Holiday Baking - Spend time together baking traditional holiday treats.\n\n"
        "5. 🎭 Attend Local Events - Find holiday concerts, markets, or light displays in your area "
        "to visit together."
    ),
    "other": (
        "Here are some ideas to make this occasion special for {name}:\n\n"
        "1. 🎁 Thoughtful Gift - Choose something that aligns with their interests or something "
        "they've mentioned wanting.\n\n"
        "2. 📝 Heartfelt Card - Write a sincere message expressing what they mean to you.\n\n"
        "3. 🍽️ Quality Time - Plan a special outing or meal where you can spend uninterrupted time together.\n\n"
        "4. 📸 Create Memories - Plan an activity that will create lasting memories, like a photoshoot "
        "or special experience.\n\n"
        "5. 🎵 Playlist or Video - Create a custom playlist of songs that remind you of them or a "
        "video montage of special moments."
    ),
}


def fallback_message(event_type: str, name: str, relation: str) -> str:
    template = FALLBACK_MESSAGES.get(event_type, FALLBACK_MESSAGES["other"])
    return template.format(name=name, relation=relation)


def fallback_plan(event_type: str, name: str, relation: str) -> str:
    template = FALLBACK_PLANS.get(event_type, FALLBACK_PLANS["other"])
    return template.format(name=name, relation=relation)


class EventContentGenerator:
    """
    Produces greeting messages and celebration plans for events.
    """

    def __init__(self, ai_provider: Optional[AIProvider] = None):
        """
        Initialize EventContentGenerator.

        Args:
            ai_provider: Configured AI provider, or None to always use templates
        """
        self._ai_provider = ai_provider

    async def generate_message(
        self,
        event_type: str,
        name: str,
        relation: str,
        notes: Optional[str] = None
    ) -> str:
        """Personalized greeting; falls back to a template on AI failure."""
        prompt = MESSAGE_PROMPT.format(
            event_type=event_type,
            name=name,
            relation=relation,
            notes=self._notes_line(notes),
        )
        text = await self._ask(prompt)
        if text:
            return text
        return fallback_message(event_type, name, relation)

    async def generate_plan(
        self,
        event_type: str,
        name: str,
        relation: str,
        notes: Optional[str] = None
    ) -> str:
        """Celebration ideas; falls back to a template on AI failure."""
        prompt = PLAN_PROMPT.format(
            event_type=event_type,
            name=name,
            relation=relation,
            notes=self._notes_line(notes),
        )
        text = await self._ask(prompt)
        if text:
            return text
        return fallback_plan(event_type, name, relation)

    async def generate_for_event(self, event: dict) -> Tuple[str, str]:
        """Generate (message, plan) from an event document."""
        args = (
            event["eventType"],
            event["recipientName"],
            event["recipientRelation"],
            event.get("notes"),
        )
        message = await self.generate_message(*args)
        plan = await self.generate_plan(*args)
        return message, plan

    def _notes_line(self, notes: Optional[str]) -> str:
        return f"Additional context about our relationship: {notes}" if notes else ""

    async def _ask(self, prompt: str) -> Optional[str]:
        if self._ai_provider is None:
            return None
        try:
            return await self._ai_provider.chat(prompt)
        except AIProviderError as e:
            logger.warning(f"Event content generation failed, using template: {e}")
            return None

"""
Wellness AI assistant.

Builds prompts for food analysis and meditation guidance, calls the
configured AI provider and parses its JSON answers. Where a fixed
fallback answer exists it is returned when the model's output cannot
be parsed.
"""

import json
import logging
import re
from typing import Optional, Any, Dict, List

from common.ai.base import AIProvider, AIProviderError
from common.utils.exceptions import InternalServerException

logger = logging.getLogger(__name__)


AI_NOT_CONFIGURED_MESSAGE = "AI service is not configured on the server."

_FENCE_PATTERN = re.compile(r"```json|```")
_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w/+.-]+)?;base64,", re.IGNORECASE)


WELLNESS_ASSISTANT_PROMPT = """As a wellness assistant, please provide a helpful, accurate, and supportive response to the following query:
"{query}"
Keep your response concise, evidence-based when possible, and focused on promoting mental and physical wellbeing."""

FOOD_IMAGE_PROMPT = (
    "Analyze the food in this image. Provide a realistic estimate for the main food item's name, "
    "total calories, protein, carbohydrates, and fats in grams. Respond ONLY with a valid JSON object "
    'in the format: {"foodName": "string", "calories": number, "protein": number, "carbs": number, "fat": number}.'
)

FOOD_TEXT_PROMPT = (
    'Analyze the following food description: "{text}". Provide a realistic estimate for the total calories, '
    "protein, carbohydrates, and fats in grams. Use the description as the 'foodName'. Respond ONLY with a "
    'valid JSON object in the format: {{"foodName": "string", "calories": number, "protein": number, '
    '"carbs": number, "fat": number}}.'
)

GUIDANCE_RESPONSE_FORMAT = """ Respond in JSON format with these fields:
{
  "text": "main guidance message in a warm, supportive tone",
  "suggestions": ["3-5 specific meditation suggestions based on context"],
  "mood": "identified mood or emotional state",
  "meditationTips": ["2-3 helpful meditation tips"],
  "customPrompt": "a short custom meditation prompt they can use right now"
}"""

MEDITATION_SCRIPT_PROMPT = """Create a guided meditation script with the theme "{theme}" that takes about {duration} minutes to read slowly.
The meditation should focus on {focus}.
Include clear instructions for breathing, body awareness, and mindfulness techniques.
The tone should be calming, supportive, and gentle.
Structure it with an introduction, main practice, and conclusion.
Do not include timestamps or section headers in the output.
Write in second person (you/your) addressing the meditator directly."""

PROGRESS_PROMPT = """Analyze this meditation progress data and provide insights and recommendations:
{progress}
Respond in JSON format with these fields:
{{
  "insights": "2-3 sentences about patterns, achievements, and areas for growth",
  "strengths": ["list of 2-3 strengths based on the data"],
  "recommendations": ["list of 3-4 specific, actionable recommendations"],
  "streakMessage": "encouraging message about their streak or consistency",
  "nextMilestone": "suggestion for next milestone to aim for"
}}"""

SLEEP_STORY_PROMPT = """Generate 5 sleep story ideas that would help someone who is feeling {mood} to fall asleep.
Each idea should have a title and a brief 1-2 sentence description.
The stories should be calming, peaceful, and conducive to sleep.
Respond in JSON format as an array of objects with title and description fields."""


GUIDANCE_FALLBACK_SUGGESTIONS = ["Mindful breathing", "Body scan", "Loving-kindness meditation"]
GUIDANCE_FALLBACK_TIPS = ["Find a quiet space", "Start with just a few minutes", "Be kind to yourself"]
GUIDANCE_FALLBACK_PROMPT = "Take three deep breaths and notice how your body feels right now."

PROGRESS_FALLBACK: Dict[str, Any] = {
    "insights": (
        "You're making steady progress in your meditation journey. "
        "Your consistency shows dedication to your practice."
    ),
    "strengths": ["Regular practice", "Exploring different meditation types"],
    "recommendations": [
        "Try increasing session duration gradually",
        "Explore mindfulness meditation",
        "Consider adding an evening session",
    ],
    "streakMessage": "Keep up your meditation streak! Consistency is key to experiencing the benefits.",
    "nextMilestone": "Aim for a 10-day consecutive meditation streak",
}

SLEEP_STORY_FALLBACK: List[Dict[str, str]] = [
    {
        "title": "Moonlit Forest Walk",
        "description": "A gentle stroll through a peaceful forest under moonlight, with the soft sounds of nature lulling you to sleep.",
    },
    {
        "title": "Ocean Waves Retreat",
        "description": "Relaxing by the ocean as gentle waves wash ashore, feeling the warm breeze and soft sand.",
    },
    {
        "title": "Cozy Mountain Cabin",
        "description": "Sheltered in a warm cabin while snow falls outside, wrapped in a soft blanket by a crackling fireplace.",
    },
    {
        "title": "Floating Among the Stars",
        "description": "A weightless journey through the night sky, drifting peacefully among twinkling stars and distant galaxies.",
    },
    {
        "title": "Secret Garden Sanctuary",
        "description": "Discovering a hidden garden filled with fragrant flowers, gentle fountains, and butterflies dancing in the sunshine.",
    },
]


def strip_json_fences(text: str) -> str:
    """Remove ```json / ``` markers models wrap around JSON."""
    return _FENCE_PATTERN.sub("", text or "").strip()


def parse_ai_json(text: str) -> Any:
    """
    Parse a model answer as JSON after stripping code fences.

    Raises:
        ValueError: If the cleaned text is not valid JSON
    """
    return json.loads(strip_json_fences(text))


def split_data_url(image: str) -> tuple:
    """
    Split an optional data: URL into (base64 payload, mime type).

    Plain base64 input is assumed to be JPEG.
    """
    match = _DATA_URL_PATTERN.match(image)
    if not match:
        return image, "image/jpeg"
    return image[match.end():], match.group("mime") or "image/jpeg"


def build_guidance_prompt(prompt: str, context: Optional[Dict[str, Any]] = None) -> str:
    """Meditation guidance prompt enriched with the user's context."""
    enhanced = f"As a meditation guide, provide personalized guidance. {prompt}"

    if context:
        if context.get("userMood"):
            enhanced += f" The user is feeling {context['userMood']} today."

        history = context.get("meditationHistory")
        if history:
            enhanced += (
                f" They have completed {history.get('totalSessions', 0)} meditation sessions "
                f"totaling {history.get('totalMinutes', 0)} minutes."
            )
            enhanced += f" They recently practiced: {', '.join(history.get('recentCategories') or [])}."
            enhanced += f" Their preferred duration is around {history.get('preferredDuration')} minutes."

        if context.get("timeOfDay"):
            enhanced += f" It's currently {context['timeOfDay']}."

        if context.get("userGoals"):
            enhanced += f" Their meditation goals include: {', '.join(context['userGoals'])}."

    return enhanced + GUIDANCE_RESPONSE_FORMAT


class AIAssistantService:
    """
    Prompt construction and response parsing around an AIProvider.

    A None provider means no API key is configured; every call then
    fails with a 500.
    """

    def __init__(self, ai_provider: Optional[AIProvider] = None):
        """
        Initialize AIAssistantService.

        Args:
            ai_provider: Configured provider, or None when AI is disabled
        """
        self._ai_provider = ai_provider

    @property
    def is_configured(self) -> bool:
        return self._ai_provider is not None

    def _require_provider(self) -> AIProvider:
        if self._ai_provider is None:
            raise InternalServerException(message=AI_NOT_CONFIGURED_MESSAGE, code="AI_NOT_CONFIGURED")
        return self._ai_provider

    async def _chat(self, prompt: str) -> str:
        provider = self._require_provider()
        try:
            return await provider.chat(prompt)
        except AIProviderError as e:
            logger.error(f"AI request failed: {e}")
            raise InternalServerException(message=str(e), code="AI_ERROR")

    async def generate_ai_response(self, query: str) -> str:
        """Answer a free-form query as the wellness assistant."""
        return await self._chat(WELLNESS_ASSISTANT_PROMPT.format(query=query))

    async def analyze_food_image(self, image: str) -> Dict[str, Any]:
        """
        Estimate the nutrition of the main food in a photo.

        Args:
            image: Base64 image, optionally as a data: URL

        Returns:
            {foodName, calories, protein, carbs, fat}
        """
        provider = self._require_provider()
        payload, mime_type = split_data_url(image)

        try:
            text = await provider.analyze_image(FOOD_IMAGE_PROMPT, payload, mime_type=mime_type)
        except AIProviderError as e:
            logger.error(f"Food image analysis failed: {e}")
            raise InternalServerException(message=str(e), code="AI_ERROR")

        try:
            return parse_ai_json(text)
        except ValueError:
            logger.error("Food image analysis returned unparseable JSON")
            raise InternalServerException(
                message="AI returned an unexpected response format.",
                code="AI_BAD_RESPONSE"
            )

    async def analyze_food_text(self, text: str) -> Dict[str, Any]:
        """Estimate the nutrition of a free-text meal description."""
        answer = await self._chat(FOOD_TEXT_PROMPT.format(text=text))
        try:
            return parse_ai_json(answer)
        except ValueError:
            logger.error("Food text analysis returned unparseable JSON")
            raise InternalServerException(
                message="AI returned an unexpected response format.",
                code="AI_BAD_RESPONSE"
            )

    async def meditation_guidance(
        self,
        prompt: str,
        context: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Personalized meditation guidance.

        When the answer is not JSON, the raw text is returned with
        fixed suggestions and tips.
        """
        answer = await self._chat(build_guidance_prompt(prompt, context))
        try:
            return parse_ai_json(answer)
        except ValueError:
            logger.warning("Meditation guidance was not JSON, returning raw text")
            return {
                "text": strip_json_fences(answer),
                "suggestions": list(GUIDANCE_FALLBACK_SUGGESTIONS),
                "mood": (context or {}).get("userMood") or "neutral",
                "meditationTips": list(GUIDANCE_FALLBACK_TIPS),
                "customPrompt": GUIDANCE_FALLBACK_PROMPT,
            }

    async def generate_meditation_script(self, theme: str, duration: int, focus: str) -> Dict[str, str]:
        script = await self._chat(MEDITATION_SCRIPT_PROMPT.format(theme=theme, duration=duration, focus=focus))
        return {"script": script}

    async def analyze_progress(self, progress_data: Any) -> Dict[str, Any]:
        answer = await self._chat(PROGRESS_PROMPT.format(progress=json.dumps(progress_data, default=str)))
        try:
            return parse_ai_json(answer)
        except ValueError:
            logger.warning("Progress analysis was not JSON, using default analysis")
            return dict(PROGRESS_FALLBACK)

    async def sleep_story_ideas(self, mood: Optional[str] = None) -> Dict[str, Any]:
        answer = await self._chat(SLEEP_STORY_PROMPT.format(mood=mood or "tired"))
        try:
            return {"ideas": parse_ai_json(answer)}
        except ValueError:
            logger.warning("Sleep story ideas were not JSON, using default ideas")
            return {"ideas": [dict(idea) for idea in SLEEP_STORY_FALLBACK]}

"""
AI nutrition coach.

Builds meal-plan, recommendation, behavior-analysis and food-analysis
prompts from a user's profile and history and parses the answers.
"""

import json
import logging
from datetime import datetime
from typing import List, Dict, Any

from common.utils.exceptions import InternalServerException
from rats.services.ai.assistant_service import AIAssistantService, parse_ai_json

logger = logging.getLogger(__name__)


MEAL_PLAN_PROMPT = """Generate a personalized meal plan for the user based on their nutrition profile, recent food logs, and dietary preferences.
The meal plan should include breakfast, lunch, dinner, and optional snacks.
For each meal, include:
- Name of the meal
- List of ingredients with portions
- Nutritional information (calories, protein, carbs, fat)
- Brief preparation instructions
- Suggested time to eat

The meal plan should meet the user's daily nutritional goals:
- Calories: {calorieGoal}
- Protein: {proteinGoal}g
- Carbs: {carbsGoal}g
- Fat: {fatGoal}g

{preferences}

The meal plan should be for {day}.

Format the response as a JSON object with the following structure:
{{
  "date": "YYYY-MM-DD",
  "totalCalories": number,
  "totalProtein": number,
  "totalCarbs": number,
  "totalFat": number,
  "meals": [
    {{
      "type": "breakfast|lunch|dinner|snack",
      "time": "HH:MM AM/PM",
      "totalCalories": number,
      "items": [
        {{
          "name": "string",
          "portion": "string",
          "calories": number,
          "protein": number,
          "carbs": number,
          "fat": number,
          "ingredients": ["string"],
          "recipe": "string",
          "alternatives": ["string"]
        }}
      ],
      "notes": "string"
    }}
  ],
  "notes": "string"
}}

Context: {context}"""

RECOMMENDATIONS_PROMPT = """Generate personalized food recommendations for the user based on their nutrition profile, recent food logs, and dietary preferences.

{preferences}

Generate 5 food recommendations that:
1. Align with the user's dietary preferences
2. Help meet their nutritional goals
3. Provide variety from their recent food logs
4. Are appropriate for their health goals

Format the response as a JSON array with the following structure for each recommendation:
[
  {{
    "foodName": "string",
    "category": "string",
    "calories": number,
    "protein": number,
    "carbs": number,
    "fat": number,
    "fiber": number,
    "portion": "string",
    "nutritionalBenefits": ["string"],
    "whyRecommended": "string",
    "bestTimeToConsume": "breakfast|lunch|dinner|snack",
    "preparationMethods": ["string"],
    "quickRecipe": "string"
  }}
]

Context: {context}"""

BEHAVIOR_ANALYSIS_PROMPT = """Analyze the user's nutrition behavior based on their behavior logs and food logs from the past 30 days.
Provide insights on:
1. Eating patterns and habits
2. Correlation between mood, stress, sleep and eating
3. Nutritional gaps or excesses
4. Behavioral patterns that may be helping or hindering their goals

Then provide personalized recommendations for improving their nutrition behavior.
Finally, suggest cognitive-behavioral therapy (CBT) strategies that could help address any identified challenges.

Format the response as a JSON object with the following structure:
{{
  "insights": [{{"category": "string", "observation": "string", "impact": "string"}}],
  "patterns": [{{"type": "string", "description": "string", "frequency": "string"}}],
  "recommendations": [{{"area": "string", "recommendation": "string", "implementationSteps": ["string"]}}],
  "cbtStrategies": [{{"challenge": "string", "technique": "string", "application": "string"}}]
}}

Context: {context}"""

FOOD_TEXT_PROMPT = """Analyze the food description: "{text}"
Identify the food items mentioned and provide:
1. Name of the food
2. Estimated portion size
3. Nutritional information (calories, protein, carbs, fat)
4. Food category
5. Health benefits

Format the response as a JSON object with the following structure:
{{
  "foodName": "string",
  "portion": "string",
  "calories": number,
  "protein": number,
  "carbs": number,
  "fat": number,
  "category": "string",
  "keyNutrients": ["string"],
  "benefits": ["string"]
}}"""


# Image recognition is simulated; this is the analysis returned for every photo
SIMULATED_IMAGE_ANALYSIS: Dict[str, Any] = {
    "identifiedFoods": [
        {
            "name": "Grilled Chicken Breast",
            "portion": "4 oz (113g)",
            "calories": 165,
            "protein": 31,
            "carbs": 0,
            "fat": 3.6,
            "fiber": 0,
            "sugar": 0,
            "category": "Protein",
        },
        {
            "name": "Brown Rice",
            "portion": "1 cup cooked (195g)",
            "calories": 216,
            "protein": 5,
            "carbs": 45,
            "fat": 1.8,
            "fiber": 3.5,
            "sugar": 0.7,
            "category": "Grain",
        },
        {
            "name": "Steamed Broccoli",
            "portion": "1 cup (156g)",
            "calories": 55,
            "protein": 3.7,
            "carbs": 11.2,
            "fat": 0.6,
            "fiber": 5.1,
            "sugar": 2.6,
            "category": "Vegetable",
        },
    ],
    "totalNutrition": {"calories": 436, "protein": 39.7, "carbs": 56.2, "fat": 6},
    "analysis": {
        "quality": 9,
        "benefits": [
            "High in protein which supports muscle maintenance",
            "Good source of fiber from vegetables and whole grains",
            "Low in added sugars and unhealthy fats",
            "Contains a variety of nutrients from different food groups",
        ],
        "concerns": [
            "Could include more healthy fats from sources like avocado or olive oil",
            "Consider adding more colorful vegetables for additional antioxidants",
        ],
    },
}


def simulated_image_analysis() -> Dict[str, Any]:
    """Fresh copy of the fixed image analysis."""
    return json.loads(json.dumps(SIMULATED_IMAGE_ANALYSIS))


def fallback_text_analysis(text: str) -> Dict[str, Any]:
    """Generic estimate used when the model's answer cannot be parsed."""
    return {
        "foodName": text,
        "portion": "1 serving",
        "calories": 200,
        "protein": 10,
        "carbs": 25,
        "fat": 8,
        "category": "Mixed",
        "keyNutrients": ["Protein", "Carbohydrates", "Fats"],
        "benefits": ["Provides energy", "Contains essential nutrients"],
    }


def _preferences_block(profile: Dict[str, Any]) -> str:
    def joined(key: str) -> str:
        return ", ".join(profile.get(key) or [])

    return (
        "Consider the user's dietary preferences:\n"
        f"- Diet type: {profile.get('dietType')}\n"
        f"- Cuisine preferences: {joined('cuisinePreferences')}\n"
        f"- Allergies: {joined('allergies')}\n"
        f"- Intolerances: {joined('intolerances')}\n"
        f"- Disliked foods: {joined('dislikedFoods')}\n"
        f"- Favorite foods: {joined('favoriteFoods')}"
    )


def build_coaching_context(
    profile: Dict[str, Any],
    recent_logs: List[Dict[str, Any]],
    behaviors: List[Dict[str, Any]]
) -> Dict[str, Any]:
    """Profile, recent foods and behaviors summarized for prompts."""
    return {
        "dietaryPreferences": {
            key: profile.get(key)
            for key in ("dietType", "cuisinePreferences", "allergies", "intolerances", "dislikedFoods", "favoriteFoods")
        },
        "nutritionGoals": {
            key: profile.get(key)
            for key in ("calorieGoal", "proteinGoal", "carbsGoal", "fatGoal")
        },
        "body": {
            "weight": profile.get("weight"),
            "height": profile.get("height"),
            "activityLevel": profile.get("activityLevel"),
            "healthGoals": profile.get("healthGoals"),
        },
        "recentFoods": [
            {"name": log.get("foodName"), "category": log.get("category"), "timestamp": log.get("createdAt")}
            for log in recent_logs
        ],
        "behaviors": [
            {
                "date": b.get("date"),
                "mealTiming": b.get("mealTiming"),
                "snackingFrequency": b.get("snackingFrequency"),
                "waterIntake": b.get("waterIntake"),
                "hungerLevels": b.get("hungerLevels"),
            }
            for b in behaviors
        ],
    }


class NutritionCoach:
    """
    AI-backed meal plans, recommendations and behavior analysis.
    """

    def __init__(self, assistant: AIAssistantService):
        """
        Initialize NutritionCoach.

        Args:
            assistant: Wellness assistant used for all model calls
        """
        self._assistant = assistant

    async def generate_meal_plan(
        self,
        profile: Dict[str, Any],
        context: Dict[str, Any],
        date: datetime
    ) -> Dict[str, Any]:
        """
        Ask the model for a day's meal plan.

        Raises:
            InternalServerException: "Failed to generate meal plan" when the answer is not JSON
        """
        prompt = MEAL_PLAN_PROMPT.format(
            calorieGoal=profile.get("calorieGoal"),
            proteinGoal=profile.get("proteinGoal"),
            carbsGoal=profile.get("carbsGoal"),
            fatGoal=profile.get("fatGoal"),
            preferences=_preferences_block(profile),
            day=date.strftime("%a %b %d %Y"),
            context=json.dumps({**context, "date": date.isoformat()}, default=str),
        )
        answer = await self._assistant.generate_ai_response(prompt)

        try:
            plan = parse_ai_json(answer)
        except ValueError:
            logger.error("Meal plan answer was not valid JSON")
            raise InternalServerException(message="Failed to generate meal plan", code="MEAL_PLAN_FAILED")

        if not isinstance(plan, dict):
            raise InternalServerException(message="Failed to generate meal plan", code="MEAL_PLAN_FAILED")
        return plan

    async def generate_recommendations(
        self,
        profile: Dict[str, Any],
        context: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        """
        Ask the model for five food recommendations.

        Raises:
            InternalServerException: When the answer is not a JSON array
        """
        prompt = RECOMMENDATIONS_PROMPT.format(
            preferences=_preferences_block(profile),
            context=json.dumps(context, default=str),
        )
        answer = await self._assistant.generate_ai_response(prompt)

        try:
            items = parse_ai_json(answer)
        except ValueError:
            items = None

        if not isinstance(items, list):
            logger.error("Recommendation answer was not a JSON array")
            raise InternalServerException(
                message="Failed to generate food recommendations",
                code="RECOMMENDATIONS_FAILED"
            )
        return [item for item in items if isinstance(item, dict)]

    async def analyze_behavior(
        self,
        profile: Dict[str, Any],
        behaviors: List[Dict[str, Any]],
        food_logs: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Insights, patterns, recommendations and CBT strategies for 30 days of data.

        Raises:
            InternalServerException: "Failed to analyze nutrition behavior"
        """
        context = {
            "profile": {
                key: profile.get(key)
                for key in ("calorieGoal", "proteinGoal", "carbsGoal", "fatGoal", "dietType", "healthGoals")
            },
            "behaviors": [
                {
                    key: b.get(key)
                    for key in (
                        "date", "mealTiming", "snackingFrequency", "waterIntake",
                        "hungerLevels", "mood", "stress", "sleep", "cravings",
                    )
                }
                for b in behaviors
            ],
            "foodLogs": [
                {
                    "date": log.get("createdAt"),
                    **{
                        key: log.get(key)
                        for key in (
                            "foodName", "category", "mealType", "calories", "protein",
                            "carbs", "fat", "mood", "hunger", "fullness",
                        )
                    },
                }
                for log in food_logs
            ],
        }
        answer = await self._assistant.generate_ai_response(
            BEHAVIOR_ANALYSIS_PROMPT.format(context=json.dumps(context, default=str))
        )

        try:
            return parse_ai_json(answer)
        except ValueError:
            logger.error("Behavior analysis answer was not valid JSON")
            raise InternalServerException(
                message="Failed to analyze nutrition behavior",
                code="BEHAVIOR_ANALYSIS_FAILED"
            )

    async def analyze_food_text(self, text: str) -> Dict[str, Any]:
        """Detailed nutrition for a food description, with a generic fallback."""
        prompt = FOOD_TEXT_PROMPT.format(text=text)
        answer = await self._assistant.generate_ai_response(f"{prompt}\n\nFood description: {text}")

        try:
            return parse_ai_json(answer)
        except ValueError:
            logger.warning("Food text answer was not valid JSON, using generic estimate")
            return fallback_text_analysis(text)

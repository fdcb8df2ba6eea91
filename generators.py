# In: generators.py

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from config import Config
import schemas

logger = logging.getLogger(__name__)


class GenerationFailure(str, Enum):
    BACKEND_ERROR = "BACKEND_ERROR"
    BACKEND_UNCONFIGURED = "BACKEND_UNCONFIGURED"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    INVALID_STRUCTURE = "INVALID_STRUCTURE"
    MISSING_IMAGE_URL = "MISSING_IMAGE_URL"


class GenerationError(Exception):
    """Raised when a generation backend call cannot produce a usable result."""

    def __init__(self, message: str, reason: GenerationFailure = GenerationFailure.BACKEND_ERROR):
        super().__init__(message)
        self.reason = reason


# --- Structural validation ---
class StructureFailure(str, Enum):
    NOT_AN_OBJECT = "NOT_AN_OBJECT"
    MISSING_OVERVIEW = "MISSING_OVERVIEW"
    MISSING_WEEKLY_PLAN = "MISSING_WEEKLY_PLAN"
    MISSING_TOTAL_DAILY_CALORIES = "MISSING_TOTAL_DAILY_CALORIES"
    MISSING_QUOTE = "MISSING_QUOTE"
    INVALID_AUTHOR = "INVALID_AUTHOR"


@dataclass
class PlanValidation:
    payload: Optional[dict] = None
    failure: Optional[StructureFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_workout_plan(data: Any) -> PlanValidation:
    """
    Top-level shape check only: overview and a non-empty weeklyPlan list.
    Days and exercises are trusted as returned.
    """
    if not isinstance(data, dict):
        return PlanValidation(failure=StructureFailure.NOT_AN_OBJECT)
    if not _non_empty_str(data.get("overview")):
        return PlanValidation(failure=StructureFailure.MISSING_OVERVIEW)
    weekly_plan = data.get("weeklyPlan")
    if not isinstance(weekly_plan, list) or not weekly_plan:
        return PlanValidation(failure=StructureFailure.MISSING_WEEKLY_PLAN)
    return PlanValidation(payload=data)


def validate_diet_plan(data: Any) -> PlanValidation:
    validation = validate_workout_plan(data)
    if not validation.ok:
        return validation
    calories = data.get("totalDailyCalories")
    # bool is an int subclass, and True is not a calorie count
    if isinstance(calories, bool) or not isinstance(calories, (int, float)) or calories <= 0:
        return PlanValidation(failure=StructureFailure.MISSING_TOTAL_DAILY_CALORIES)
    return PlanValidation(payload=data)


def validate_motivation(data: Any) -> PlanValidation:
    if not isinstance(data, dict):
        return PlanValidation(failure=StructureFailure.NOT_AN_OBJECT)
    if not _non_empty_str(data.get("quote")):
        return PlanValidation(failure=StructureFailure.MISSING_QUOTE)
    author = data.get("author")
    if author is not None and not isinstance(author, str):
        return PlanValidation(failure=StructureFailure.INVALID_AUTHOR)
    return PlanValidation(payload=data)


# --- Prompts ---
WORKOUT_PLAN_FORMAT = """{
  "overview": "string",
  "weeklyPlan": [
    {
      "day": "Day 1 - Monday",
      "exercises": [
        {
          "name": "Exercise name",
          "sets": 3,
          "reps": "10-12",
          "duration": "30 seconds (optional)",
          "difficulty": "Beginner | Intermediate | Advanced",
          "muscleGroup": "Chest/Back/Legs/etc",
          "equipment": "Dumbbells/Bodyweight/etc",
          "instructions": "Brief step-by-step instructions"
        }
      ]
    }
  ]
}"""

DIET_PLAN_FORMAT = """{
  "overview": "string",
  "totalDailyCalories": 2000,
  "weeklyPlan": [
    {
      "day": "Day 1 - Monday",
      "meals": [
        {
          "name": "Meal name",
          "mealType": "Breakfast | Lunch | Dinner | Snack",
          "calories": 450,
          "protein": 25,
          "carbs": 50,
          "fats": 15,
          "ingredients": ["ingredient 1", "ingredient 2"],
          "preparation": "Brief preparation steps"
        }
      ]
    }
  ]
}"""

MOTIVATION_FORMAT = """{
  "quote": "string",
  "author": "string"
}"""


def _profile_lines(profile: schemas.ProfileBase, extra: dict) -> str:
    lines = [
        f"Name: {profile.name}",
        f"Age: {profile.age}",
        f"Gender: {profile.gender}",
        f"Height: {profile.height:g}cm",
        f"Weight: {profile.weight:g}kg",
        f"Fitness Goal: {profile.fitness_goal}",
    ]
    lines.extend(f"{label}: {value}" for label, value in extra.items())
    if profile.medical_history:
        lines.append(f"Medical History: {profile.medical_history}")
    if profile.stress_level:
        lines.append(f"Stress Level: {profile.stress_level}")
    return "\n".join(lines)


class JSONCompletionGenerator:
    """
    Shared pattern for text generation: build a prompt, ask the backend for a
    single JSON object, parse it and check its shape.

    Subclasses set `label` and `system_prompt` and implement `build_prompt`
    and `validate`.
    """

    label = "content"
    system_prompt = ""

    def __init__(self, client, model: str = None, temperature: float = None):
        self.client = client
        self.model = model or Config.GROQ_MODEL_NAME
        self.temperature = Config.GROQ_TEMPERATURE if temperature is None else temperature

    def build_prompt(self, data) -> str:
        raise NotImplementedError

    def validate(self, result: Any) -> PlanValidation:
        raise NotImplementedError

    def _fail(self, cause: str, reason: GenerationFailure) -> GenerationError:
        return GenerationError(f"Failed to generate {self.label}: {cause}", reason)

    async def generate(self, data) -> dict:
        if self.client is None:
            raise self._fail("text generation is not configured (GROQ_API_KEY is missing)",
                             GenerationFailure.BACKEND_UNCONFIGURED)

        prompt = self.build_prompt(data)

        try:
            chat_completion = await self.client.chat.completions.create(
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": prompt},
                ],
                model=self.model,
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            logger.error("Error generating %s: %s: %s", self.label, type(e).__name__, e)
            raise self._fail(str(e), GenerationFailure.BACKEND_ERROR) from e

        content = None
        if chat_completion.choices:
            content = chat_completion.choices[0].message.content
        if not content:
            logger.error("Empty %s response from AI", self.label)
            raise self._fail("empty response from AI", GenerationFailure.EMPTY_RESPONSE)

        try:
            result = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error("Malformed %s response from AI: %s", self.label, content[:200])
            raise self._fail("malformed response from AI", GenerationFailure.MALFORMED_RESPONSE) from e

        validation = self.validate(result)
        if not validation.ok:
            logger.error("Invalid %s structure from AI: %s", self.label, validation.failure.value)
            raise self._fail(
                f"Invalid {self.label} structure received from AI",
                GenerationFailure.INVALID_STRUCTURE,
            )

        return validation.payload


class WorkoutPlanGenerator(JSONCompletionGenerator):
    label = "workout plan"
    system_prompt = (
        "You are an expert fitness coach who creates personalized workout plans. "
        "Always respond with valid JSON."
    )

    def build_prompt(self, profile: schemas.ProfileBase) -> str:
        details = _profile_lines(profile, {
            "Fitness Level": profile.fitness_level,
            "Workout Location": profile.workout_location,
        })
        return f"""You are an expert fitness coach. Generate a personalized 7-day workout plan for the following user:

{details}

Please create a comprehensive weekly workout plan with the following structure:
- Provide an overview (2-3 sentences) explaining the plan's approach
- Create 7 daily workout plans
- Each day should have 3-6 exercises
- For each exercise, include: name, sets, reps (or duration), difficulty level (Beginner/Intermediate/Advanced), muscle group targeted, equipment needed, and brief instructions

Respond in JSON format with this exact structure:
{WORKOUT_PLAN_FORMAT}"""

    def validate(self, result: Any) -> PlanValidation:
        return validate_workout_plan(result)


class DietPlanGenerator(JSONCompletionGenerator):
    label = "diet plan"
    system_prompt = (
        "You are an expert nutritionist who creates personalized diet plans. "
        "Always respond with valid JSON."
    )

    def build_prompt(self, profile: schemas.ProfileBase) -> str:
        details = _profile_lines(profile, {
            "Dietary Preference": profile.dietary_preference,
        })
        return f"""You are an expert nutritionist. Generate a personalized 7-day diet plan for the following user:

{details}

Please create a comprehensive weekly diet plan with the following structure:
- Provide an overview (2-3 sentences) explaining the nutrition approach
- Specify the total daily calorie target
- Create 7 daily meal plans
- Each day should have 4-5 meals (breakfast, lunch, dinner, and 1-2 snacks)
- For each meal, include: name, meal type, calories, protein (g), carbs (g), fats (g), ingredients list, and brief preparation instructions

Respond in JSON format with this exact structure:
{DIET_PLAN_FORMAT}"""

    def validate(self, result: Any) -> PlanValidation:
        return validate_diet_plan(result)


class MotivationGenerator(JSONCompletionGenerator):
    label = "motivation"
    system_prompt = (
        "You are an upbeat personal trainer who writes short motivational quotes. "
        "Always respond with valid JSON."
    )

    def build_prompt(self, request: schemas.MotivationRequest) -> str:
        return f"""Write one short, original motivational quote (at most 2 sentences) for {request.name}, whose fitness goal is: {request.fitness_goal}.
Address them by name and keep it positive and specific to the goal.

Respond in JSON format with this exact structure:
{MOTIVATION_FORMAT}"""

    def validate(self, result: Any) -> PlanValidation:
        return validate_motivation(result)


# --- Images ---
EXERCISE_IMAGE_PROMPT = (
    "High-quality photorealistic image of a fit athlete performing {name} with perfect form "
    "in a clean, modern gym. Full body visible, correct posture, proper biomechanics, natural "
    "lighting, realistic muscles, DSLR 50mm lens, sharp details, dynamic angle, cinematic 4K "
    "shot, no text, no watermark, hyperrealistic training photoshoot style."
)

MEAL_IMAGE_PROMPT = (
    "Beautifully plated, vibrant, healthy {name} with professional food styling. Soft natural "
    "lighting, shallow depth of field, restaurant-quality presentation, macro 8K detail, clean "
    "background, no text, no people, no cutlery, appetizing and colorful."
)

ITEM_TYPES = ("exercise", "meal")


class ImageGenerator:
    """Generates one illustrative image for an exercise or a meal."""

    def __init__(self, client, model: str = None, size: str = None, quality: str = None):
        self.client = client
        self.model = model or Config.IMAGE_MODEL
        self.size = size or Config.IMAGE_SIZE
        self.quality = quality or Config.IMAGE_QUALITY

    @staticmethod
    def build_prompt(item_name: str, item_type: str) -> str:
        if item_type == "exercise":
            return EXERCISE_IMAGE_PROMPT.format(name=item_name)
        return MEAL_IMAGE_PROMPT.format(name=item_name)

    async def generate(self, item_name: str, item_type: str) -> str:
        """Returns the URL of the generated image."""
        if self.client is None:
            raise GenerationError(
                "Failed to generate image: image generation is not configured (OPENAI_API_KEY is missing)",
                GenerationFailure.BACKEND_UNCONFIGURED,
            )
        try:
            response = await self.client.images.generate(
                model=self.model,
                prompt=self.build_prompt(item_name, item_type),
                n=1,
                size=self.size,
                quality=self.quality,
            )
        except Exception as e:
            logger.error("Error generating image for %r: %s: %s", item_name, type(e).__name__, e)
            raise GenerationError(f"Failed to generate image: {e}") from e

        image_url = response.data[0].url if response.data else None
        if not image_url:
            raise GenerationError(
                "Failed to generate image: No image URL received from the image backend",
                GenerationFailure.MISSING_IMAGE_URL,
            )
        return image_url

# In: schemas.py

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Profile schemas ---
class ProfileBase(CamelModel):
    name: str = Field(min_length=1)
    age: int = Field(gt=0)
    gender: str = Field(min_length=1)
    height: float = Field(gt=0) # cm
    weight: float = Field(gt=0) # kg
    fitness_goal: str = Field(min_length=1)
    fitness_level: str = Field(min_length=1)
    workout_location: str = Field(min_length=1)
    dietary_preference: str = Field(min_length=1)
    medical_history: Optional[str] = None
    stress_level: Optional[str] = None


class ProfileCreate(ProfileBase):
    pass


class GeneratePlanRequest(ProfileBase):
    profile_id: str = Field(min_length=1)

    def profile_data(self) -> ProfileCreate:
        """The profile fields without the identifier."""
        return ProfileCreate(**self.model_dump(exclude={"profile_id"}))


class Profile(ProfileBase):
    id: str
    model_config = ConfigDict(from_attributes=True)


class ProfileCreated(CamelModel):
    profile_id: str


# --- Plan payloads ---
# These document what the generators ask the model for. Responses are not
# validated against them beyond the top-level checks in generators.py.
class Exercise(CamelModel):
    name: str
    difficulty: Literal["Beginner", "Intermediate", "Advanced"]
    muscle_group: str
    sets: Optional[int] = None
    reps: Optional[str] = None
    duration: Optional[str] = None
    equipment: Optional[str] = None
    instructions: Optional[str] = None


class WorkoutDay(CamelModel):
    day: str
    exercises: List[Exercise]


class WorkoutPlanPayload(CamelModel):
    overview: str
    weekly_plan: List[WorkoutDay]


class Meal(CamelModel):
    name: str
    meal_type: Literal["Breakfast", "Lunch", "Dinner", "Snack"]
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fats: float = Field(ge=0)
    ingredients: Optional[List[str]] = None
    preparation: Optional[str] = None


class DietDay(CamelModel):
    day: str
    meals: List[Meal]


class DietPlanPayload(CamelModel):
    overview: str
    total_daily_calories: int = Field(gt=0)
    weekly_plan: List[DietDay]


# --- Images ---
class ImageResponse(CamelModel):
    image_url: str


# --- Motivation ---
class MotivationRequest(CamelModel):
    name: str = Field(min_length=1)
    fitness_goal: str = Field(min_length=1)


class MotivationQuote(BaseModel):
    quote: str
    author: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    code: str

# In: models.py

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text
from database import Base


def _new_id():
    return str(uuid.uuid4())


def _now():
    return datetime.now(timezone.utc)


class UserProfile(Base):
    __tablename__ = "user_profiles"
    id = Column(String(36), primary_key=True, default=_new_id)

    name = Column(String, nullable=False)

    # Biometrics
    age = Column(Integer, nullable=False)
    gender = Column(String, nullable=False)
    height = Column(Float, nullable=False) # in cm
    weight = Column(Float, nullable=False) # in kg

    # Goals and preferences
    fitness_goal = Column(String, nullable=False) # e.g., 'Lose Weight', 'Build Muscle'
    fitness_level = Column(String, nullable=False) # e.g., 'Beginner'
    workout_location = Column(String, nullable=False) # e.g., 'Home', 'Gym'
    dietary_preference = Column(String, nullable=False) # e.g., 'Vegetarian'

    # Optional health info
    medical_history = Column(Text, nullable=True)
    stress_level = Column(String, nullable=True)


# Plans keep the generated payload verbatim; profile_id is indexed but not
# unique, crud.put_plan keeps it to one row per profile.
class WorkoutPlan(Base):
    __tablename__ = "workout_plans"
    id = Column(String(36), primary_key=True, default=_new_id)
    profile_id = Column(String(36), index=True, nullable=False)
    plan_data = Column(JSON, nullable=False)


class DietPlan(Base):
    __tablename__ = "diet_plans"
    id = Column(String(36), primary_key=True, default=_new_id)
    profile_id = Column(String(36), index=True, nullable=False)
    plan_data = Column(JSON, nullable=False)


class GeneratedImage(Base):
    __tablename__ = "generated_images"
    id = Column(String(36), primary_key=True, default=_new_id)
    item_name = Column(String, index=True, nullable=False) # cache key
    item_type = Column(String, nullable=False) # 'exercise' or 'meal', informational
    image_url = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

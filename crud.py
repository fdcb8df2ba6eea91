# In: crud.py

from typing import Optional, Type, Union

from sqlalchemy.orm import Session
import models
import schemas

PlanModel = Union[Type[models.WorkoutPlan], Type[models.DietPlan]]


# --- Profiles ---
def get_profile(db: Session, profile_id: str) -> Optional[models.UserProfile]:
    return db.get(models.UserProfile, profile_id)


def create_profile(db: Session, profile_data: schemas.ProfileCreate) -> models.UserProfile:
    """
    Stores a new profile under a freshly generated identifier.
    Identical data submitted twice yields two profiles.
    """
    db_profile = models.UserProfile(**profile_data.model_dump())
    db.add(db_profile)
    db.commit()
    db.refresh(db_profile)
    return db_profile


def update_profile(db: Session, profile_id: str, profile_data: schemas.ProfileCreate) -> models.UserProfile:
    """
    Replaces every field of the profile stored under profile_id.
    If nothing is stored under that id yet, a profile is created with it.
    """
    db_profile = get_profile(db, profile_id)
    if db_profile:
        for key, value in profile_data.model_dump().items():
            setattr(db_profile, key, value)
    else:
        db_profile = models.UserProfile(id=profile_id, **profile_data.model_dump())
        db.add(db_profile)

    db.commit()
    db.refresh(db_profile)
    return db_profile


def upsert_profile(db: Session, profile_id: Optional[str], profile_data: schemas.ProfileCreate) -> models.UserProfile:
    """
    Updates the profile if profile_id is known, otherwise creates a new one
    with a fresh identifier.
    """
    if profile_id and get_profile(db, profile_id):
        return update_profile(db, profile_id, profile_data)
    return create_profile(db, profile_data)


# --- Plans ---
def get_plan_by_profile(db: Session, plan_model: PlanModel, profile_id: str):
    return db.query(plan_model).filter(plan_model.profile_id == profile_id).first()


def put_plan(db: Session, plan_model: PlanModel, profile_id: str, plan_data: dict):
    """
    Stores plan_data as the profile's plan of this kind.
    An existing plan keeps its identifier and gets the new payload.
    """
    db_plan = get_plan_by_profile(db, plan_model, profile_id)
    if db_plan:
        db_plan.plan_data = plan_data
    else:
        db_plan = plan_model(profile_id=profile_id, plan_data=plan_data)
        db.add(db_plan)

    db.commit()
    db.refresh(db_plan)
    return db_plan


# --- Image cache ---
def get_image_by_name(db: Session, item_name: str) -> Optional[models.GeneratedImage]:
    """
    Looks up a cached image by item name only; the item type is not part of
    the key. The earliest entry wins if the name was written twice.
    """
    return (
        db.query(models.GeneratedImage)
        .filter(models.GeneratedImage.item_name == item_name)
        .order_by(models.GeneratedImage.created_at)
        .first()
    )


def create_image(db: Session, item_name: str, item_type: str, image_url: str) -> models.GeneratedImage:
    """
    Inserts unconditionally. Callers check get_image_by_name first.
    """
    db_image = models.GeneratedImage(item_name=item_name, item_type=item_type, image_url=image_url)
    db.add(db_image)
    db.commit()
    db.refresh(db_image)
    return db_image

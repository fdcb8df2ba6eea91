# In: main.py

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException
from groq import AsyncGroq
from openai import AsyncOpenAI

import crud
import models
import schemas
from config import Config
from database import SessionLocal, engine
from errors import APIException, BadRequestError, GenerationFailedError, NotFoundError
from generators import (
    ITEM_TYPES,
    DietPlanGenerator,
    GenerationError,
    ImageGenerator,
    MotivationGenerator,
    WorkoutPlanGenerator,
)
from logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

# This line creates the database tables defined in models.py
models.Base.metadata.create_all(bind=engine)

# Backend clients, created on first use and closed on shutdown
_clients = {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    for name, backend_client in list(_clients.items()):
        await backend_client.close()
        logger.info(f"Closed {name} generation client")
    _clients.clear()


app = FastAPI(title="FitPlan Backend", lifespan=lifespan)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse},
    500: {"model": schemas.ErrorResponse},
}

# Generic 400 message per route when the request body fails validation
VALIDATION_MESSAGES = {
    "/api/profile": "Invalid profile data",
    "/api/generate-workout": "Invalid plan request data",
    "/api/generate-diet": "Invalid plan request data",
    "/api/motivation": "Name and fitness goal are required",
}

HTTP_ERROR_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


# --- Dependencies ---
# Store access stays on the event loop: get_db and every handler touching the
# session are async, and each crud call runs to its commit without yielding.
# Tests swap these out via dependency_overrides.
async def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# A missing API key yields None; the generators report it as BACKEND_UNCONFIGURED
# only when a call would actually be made.
def get_text_client():
    if not Config.GROQ_API_KEY:
        return None
    if "text" not in _clients:
        _clients["text"] = AsyncGroq(api_key=Config.GROQ_API_KEY)
    return _clients["text"]


def get_image_client():
    if not Config.OPENAI_API_KEY:
        return None
    if "image" not in _clients:
        _clients["image"] = AsyncOpenAI(api_key=Config.OPENAI_API_KEY)
    return _clients["image"]


def get_workout_generator(client=Depends(get_text_client)) -> WorkoutPlanGenerator:
    return WorkoutPlanGenerator(client)


def get_diet_generator(client=Depends(get_text_client)) -> DietPlanGenerator:
    return DietPlanGenerator(client)


def get_motivation_generator(client=Depends(get_text_client)) -> MotivationGenerator:
    return MotivationGenerator(client)


def get_image_generator(client=Depends(get_image_client)) -> ImageGenerator:
    return ImageGenerator(client)


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start_time
    logger.info(
        f"{request.method} {request.url.path} - {response.status_code}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(elapsed * 1000, 2),
        },
    )
    response.headers["X-Process-Time"] = str(elapsed)
    return response


# --- Error handlers ---
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "code": exc.error_code},
        headers=exc.headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Routing errors (unknown path, wrong method) and plain HTTPExceptions
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "code": HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": VALIDATION_MESSAGES.get(request.url.path, "Invalid request data"),
            "code": "VALIDATION_ERROR",
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


def _generation_failed(exc: GenerationError) -> GenerationFailedError:
    return GenerationFailedError(str(exc), exc.reason.value)


# --- Profile Endpoints ---
@app.post("/api/profile", response_model=schemas.ProfileCreated, responses=ERROR_RESPONSES)
async def create_profile(profile: schemas.ProfileCreate, db: Session = Depends(get_db)):
    db_profile = crud.create_profile(db, profile)
    logger.info("Created profile", extra={"profile_id": db_profile.id})
    return schemas.ProfileCreated(profile_id=db_profile.id)


@app.get("/api/profile/{profile_id}", response_model=schemas.Profile, responses=ERROR_RESPONSES)
async def read_profile(profile_id: str, db: Session = Depends(get_db)):
    profile = crud.get_profile(db, profile_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


# --- Plan generation ---
# The client resends the whole profile with every generation request; it is
# written back before generating so the stored profile tracks the latest values.
@app.post("/api/generate-workout", responses={200: {"model": schemas.WorkoutPlanPayload}, **ERROR_RESPONSES})
async def generate_workout(
    request: schemas.GeneratePlanRequest,
    db: Session = Depends(get_db),
    generator: WorkoutPlanGenerator = Depends(get_workout_generator),
):
    profile_data = request.profile_data()
    crud.update_profile(db, request.profile_id, profile_data)

    try:
        plan_data = await generator.generate(profile_data)
    except GenerationError as exc:
        raise _generation_failed(exc)

    crud.put_plan(db, models.WorkoutPlan, request.profile_id, plan_data)
    logger.info("Stored workout plan", extra={"profile_id": request.profile_id})
    return plan_data


@app.post("/api/generate-diet", responses={200: {"model": schemas.DietPlanPayload}, **ERROR_RESPONSES})
async def generate_diet(
    request: schemas.GeneratePlanRequest,
    db: Session = Depends(get_db),
    generator: DietPlanGenerator = Depends(get_diet_generator),
):
    profile_data = request.profile_data()
    crud.update_profile(db, request.profile_id, profile_data)

    try:
        plan_data = await generator.generate(profile_data)
    except GenerationError as exc:
        raise _generation_failed(exc)

    crud.put_plan(db, models.DietPlan, request.profile_id, plan_data)
    logger.info("Stored diet plan", extra={"profile_id": request.profile_id})
    return plan_data


# --- Stored plans ---
def _read_plan(db: Session, plan_model, profile_id: str, label: str):
    if not profile_id.strip():
        raise BadRequestError("Profile ID is required")
    plan = crud.get_plan_by_profile(db, plan_model, profile_id)
    if plan is None:
        raise NotFoundError(f"{label} not found")
    return plan.plan_data


@app.get("/api/workout-plan/", include_in_schema=False)
@app.get("/api/diet-plan/", include_in_schema=False)
async def missing_profile_id():
    raise BadRequestError("Profile ID is required")


@app.get("/api/workout-plan/{profile_id}", responses={200: {"model": schemas.WorkoutPlanPayload}, 404: {"model": schemas.ErrorResponse}, **ERROR_RESPONSES})
async def read_workout_plan(profile_id: str, db: Session = Depends(get_db)):
    return _read_plan(db, models.WorkoutPlan, profile_id, "Workout plan")


@app.get("/api/diet-plan/{profile_id}", responses={200: {"model": schemas.DietPlanPayload}, 404: {"model": schemas.ErrorResponse}, **ERROR_RESPONSES})
async def read_diet_plan(profile_id: str, db: Session = Depends(get_db)):
    return _read_plan(db, models.DietPlan, profile_id, "Diet plan")


# --- Images (cache-or-generate) ---
@app.get("/api/generate-image", response_model=schemas.ImageResponse, responses=ERROR_RESPONSES)
async def generate_image(
    item_name: Optional[str] = Query(None, alias="itemName"),
    item_type: Optional[str] = Query(None, alias="itemType"),
    db: Session = Depends(get_db),
    generator: ImageGenerator = Depends(get_image_generator),
):
    if not item_name or not item_type:
        raise BadRequestError("itemName and itemType are required")
    if item_type not in ITEM_TYPES:
        raise BadRequestError("itemType must be 'exercise' or 'meal'")

    cached_image = crud.get_image_by_name(db, item_name)
    if cached_image:
        logger.info("Image cache hit", extra={"item_name": item_name})
        return schemas.ImageResponse(image_url=cached_image.image_url)

    logger.info("Image cache miss, generating", extra={"item_name": item_name})
    try:
        image_url = await generator.generate(item_name, item_type)
    except GenerationError as exc:
        raise _generation_failed(exc)

    crud.create_image(db, item_name, item_type, image_url)
    return schemas.ImageResponse(image_url=image_url)


# --- Motivation ---
@app.post("/api/motivation", response_model=schemas.MotivationQuote, responses=ERROR_RESPONSES)
async def motivation(
    request: schemas.MotivationRequest,
    generator: MotivationGenerator = Depends(get_motivation_generator),
):
    try:
        return await generator.generate(request)
    except GenerationError as exc:
        raise _generation_failed(exc)


# --- Root Endpoint ---
@app.get("/")
async def read_root():
    return {"message": "Hello, FitPlan Backend!"}

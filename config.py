# In: config.py

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    # Groq text generation (plans, motivation)
    GROQ_API_KEY = os.environ.get("GROQ_API_KEY")
    GROQ_MODEL_NAME = os.environ.get("GROQ_MODEL_NAME", "llama-3.3-70b-versatile")
    GROQ_TEMPERATURE = float(os.environ.get("GROQ_TEMPERATURE", "0.7"))

    # OpenAI image generation
    OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY")
    IMAGE_MODEL = os.environ.get("IMAGE_MODEL", "dall-e-3")
    IMAGE_SIZE = os.environ.get("IMAGE_SIZE", "1024x1024")
    IMAGE_QUALITY = os.environ.get("IMAGE_QUALITY", "standard")

    # Storage (in-memory SQLite unless told otherwise)
    DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite://")

    # CORS
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
        ).split(",")
        if origin.strip()
    ]

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")

    DEBUG = os.environ.get("DEBUG", "false").lower() == "true"

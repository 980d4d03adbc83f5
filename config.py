"""
config.py
-----------------
Application settings, loaded into Flask with app.config.from_object(Config).
Values come from the environment (or a local .env file).
"""

import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "jansetu-dev-secret")
    MONGO_URI = os.environ.get("MONGO_URI", "mongodb://localhost:27017/JanSetu")

    # External multimodal model used by the face flows
    ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY")
    VISION_MODEL = os.environ.get("VISION_MODEL", "claude-sonnet-4-20250514")
    VISION_MAX_TOKENS = int(os.environ.get("VISION_MAX_TOKENS", "1024"))

    # Media
    UPLOAD_FOLDER = os.environ.get(
        "UPLOAD_FOLDER", os.path.join(BASE_DIR, "static", "uploads", "beneficiaries")
    )
    MAX_PHOTO_DIMENSION = int(os.environ.get("MAX_PHOTO_DIMENSION", "640"))
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    # Create unique indexes when the app starts
    MONGO_CREATE_INDEXES = True

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    MONGO_URI = "mongodb://localhost:27017/JanSetuTest"
    ANTHROPIC_API_KEY = "test-key"
    LOG_LEVEL = "DEBUG"
    MONGO_CREATE_INDEXES = False

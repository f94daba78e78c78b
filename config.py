import os
from dotenv import load_dotenv
from datetime import timedelta

from utils.constants import (
    GUARD_NAME,
    DEFAULT_REGISTRATION_ROLE,
    OVERRIDE_ROLE,
    PROTECTED_ROLES,
)

load_dotenv()

class Config:
    DB_USER = os.getenv("DB_USER", "postgres")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "password")
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = os.getenv("DB_PORT", "5432")
    DB_NAME = os.getenv("DB_NAME", "rbac_admin")

    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_HOURS", "24")))
    JWT_ERROR_MESSAGE_KEY = "message"

    # Uploads
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "storage")
    MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", str(100 * 1024 * 1024)))  # 100MB per file
    ALLOWED_UPLOAD_EXTENSIONS = [
        ext.strip().lower()
        for ext in os.getenv("ALLOWED_UPLOAD_EXTENSIONS", "jpg,jpeg,png,mp4").split(",")
        if ext.strip()
    ]

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
        if origin.strip()
    ]

    # RBAC
    GUARD_NAME = os.getenv("GUARD_NAME", GUARD_NAME)
    DEFAULT_REGISTRATION_ROLE = os.getenv("DEFAULT_REGISTRATION_ROLE", DEFAULT_REGISTRATION_ROLE)
    OVERRIDE_ROLE = os.getenv("OVERRIDE_ROLE", OVERRIDE_ROLE)
    PROTECTED_ROLES = PROTECTED_ROLES

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

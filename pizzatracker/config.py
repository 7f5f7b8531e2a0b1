
import warnings
import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
    LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", "instance/storage")
    DEFAULT_ROLE = os.getenv("DEFAULT_ROLE", "ADMIN")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True
    }

    if not SQLALCHEMY_DATABASE_URI:
        if STORAGE_BACKEND == "remote":
            warnings.warn(
                "DATABASE_URL is not set. Remote backend falls back to local SQLite (sqlite:///local.db).",
                RuntimeWarning
            )
        SQLALCHEMY_DATABASE_URI = "sqlite:///local.db"

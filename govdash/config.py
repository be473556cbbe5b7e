import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///govdash.db")
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Upper bound on the number of options a proposal may carry.
    GOVDASH_MAX_OPTIONS = int(os.getenv("GOVDASH_MAX_OPTIONS", "20"))

"""
Configuration settings for the Policy Conflict Engine.
"""
import os
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Application settings."""

    # Application settings
    PROJECT_NAME: str = "Policy Conflict Engine"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = "Detect setting-level conflicts across device-management policies"

    # API settings
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Comparison settings
    RELATED_POLICY_CAP: int = int(os.getenv("RELATED_POLICY_CAP", "20"))
    ATTRIBUTE_WALK_MAX_DEPTH: int = int(os.getenv("ATTRIBUTE_WALK_MAX_DEPTH", "5"))
    GROUP_SUMMARY_CHILD_LIMIT: int = int(os.getenv("GROUP_SUMMARY_CHILD_LIMIT", "3"))
    TREAT_NOT_CONFIGURED_AS_DISABLED: bool = (
        os.getenv("TREAT_NOT_CONFIGURED_AS_DISABLED", "True").lower() == "true"
    )

    # Management console deep links
    PORTAL_BASE_URL: str = os.getenv("PORTAL_BASE_URL", "https://intune.microsoft.com")

    # Security settings
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost",
        "http://localhost:5000",
        "http://127.0.0.1",
        "http://127.0.0.1:5000"
    ]


settings = Settings()

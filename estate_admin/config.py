# ================================
# CONFIGURATION (config.py)
# ================================

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Dict

class Settings(BaseSettings):
    # Backend services (write/read split)
    WRITE_API_URL: str = "http://127.0.0.1:8000/api"
    READ_API_URL: str = "http://127.0.0.1:8001/api"
    REQUEST_TIMEOUT: float = 30.0

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    DROPDOWN_PAGE_SIZE: int = 100

    # Session storage
    AUTH_TOKEN_KEY: str = "admin_token"
    AUTH_USER_KEY: str = "admin_user"
    SESSION_FILE: Optional[str] = None  # Persist the session as JSON when set

    # App Settings
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # Ignore extra fields from .env
    )

settings = Settings()

# ================================
# RESOURCE PATHS
# ================================

# resource -> (write prefix, read prefix)
RESOURCE_PATHS: Dict[str, tuple] = {
    "admins": ("admins", "admin"),
    "projects": ("projects", "projects"),
    "schemes": ("schemes", "investment-schemes"),
    "units": ("purchased-units", "purchased-units"),
    "agreements": ("legal-agreements", "legal-agreements"),
    "agents": ("agents", "agents"),
    "contact_info": ("contactInfo", "contactInfo"),
    "contact_inquiries": ("contact-inquiry", "contact-inquiry"),
}

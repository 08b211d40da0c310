"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="support-desk", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Storage ==========
    storage_backend: str = Field(
        default="memory",
        description="Entity store backend: 'memory' or 'postgres'"
    )
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/support_desk",
        description="PostgreSQL connection URL (async)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)
    seed_demo_data: bool = Field(
        default=True,
        description="Insert sample support cases on startup when the case collection is empty"
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # ========== Grafana OTLP Metrics ==========
    grafana_host: Optional[str] = Field(
        default=None,
        description="Grafana OTLP gateway URL (e.g., https://otlp-gateway-prod-ap-south-1.grafana.net)"
    )
    grafana_api_key: Optional[str] = Field(
        default=None,
        description="Grafana API key for OTLP authentication"
    )
    grafana_instance_id: Optional[str] = Field(
        default=None,
        description="Grafana instance ID for OTLP authentication"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        """Ensure storage backend is a known one."""
        allowed = {StorageBackend.MEMORY, StorageBackend.POSTGRES}
        v = v.lower()
        if v not in allowed:
            raise ValueError(f"storage_backend must be one of {allowed}")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# ========== Constants ==========

class StorageBackend(str):
    """Entity store backends."""
    MEMORY = "memory"
    POSTGRES = "postgres"


class SeniorityLevel(str):
    """Support person seniority levels, lowest first."""
    JUNIOR = "Junior"
    MID_LEVEL = "MidLevel"
    SENIOR = "Senior"
    LEAD = "Lead"
    MANAGER = "Manager"


class SortOrder(str):
    """Listing sort directions."""
    ASC = "asc"
    DESC = "desc"


class PersonSortField(str):
    """Sort keys accepted by the support person listing."""
    NAME = "name"
    SENIORITY = "seniority"
    WORKLOAD = "workload"
    RATING = "rating"


# ========== Lists for validation ==========

SENIORITY_LEVELS = [
    SeniorityLevel.JUNIOR, SeniorityLevel.MID_LEVEL, SeniorityLevel.SENIOR,
    SeniorityLevel.LEAD, SeniorityLevel.MANAGER
]
APPROVED_SPECIALIZATIONS = [
    "Authentication", "Network Security", "Windows Server", "Database",
    "Performance Tuning", "Cloud Services", "Azure Active Directory",
    "Email Systems", "Backup & Recovery", "Hardware", "Mobile Devices"
]

# Phrases that must not appear in assignment reasoning (matched case-insensitively)
BLOCKED_REASONING_PATTERNS = ["@", "customer name:", "phone:", "personal assessment"]

# ========== Limits ==========

ALIAS_PATTERN = r"^[a-zA-Z0-9._-]+$"
ALIAS_MIN_LENGTH = 3
ALIAS_MAX_LENGTH = 50
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
SPECIALIZATION_MIN_LENGTH = 2
SPECIALIZATION_MAX_LENGTH = 50
MAX_SPECIALIZATIONS = 10
MIN_WORKLOAD = 0
MAX_WORKLOAD = 100
MIN_SATISFACTION_RATING = 1.0
MAX_SATISFACTION_RATING = 5.0
MAX_REASONING_LENGTH = 2000

LEGACY_PAGE_SIZE = 10
DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 100

# Workload below which a support person counts as available
AVAILABILITY_WORKLOAD_THRESHOLD = 10

# Number of referencing case ids reported when a delete is refused
DELETE_CONFLICT_SAMPLE_SIZE = 3

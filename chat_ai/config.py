from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from chat_ai.features.proactive_scheduling.config import SchedulingConfig

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    # Message store (Postgres)
    DATABASE_URL: str = "postgresql://localhost:5432/chat"

    # Redis settings
    REDIS_URL: str = "redis://localhost:6379/0"

    # OpenAI settings (topic enrichment only)
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TIMEOUT_SECONDS: float = 10.0

    # Firebase auth
    FIREBASE_PROJECT_ID: str | None = None

    # =================================================================
    # DATABASE POOL SETTINGS
    # =================================================================
    DB_POOL_MIN_SIZE: int = 2
    DB_POOL_MAX_SIZE: int = 10
    DB_POOL_TIMEOUT: float = 30.0
    DB_POOL_MAX_IDLE: float = 600.0  # 10 minutes
    DB_POOL_MAX_LIFETIME: float = 3600.0  # 1 hour

    # =================================================================
    # PROACTIVE ASSISTANT SETTINGS
    # =================================================================
    PROACTIVE_CACHE_TTL_SECONDS: int = 3600
    PROACTIVE_DEFAULT_LIMIT: int = 50
    PROACTIVE_MAX_LIMIT: int = 200
    PROACTIVE_TOPIC_ENRICHMENT: bool = False

    SCHEDULING_TIMEZONE: str = "America/Los_Angeles"
    SCHEDULING_TRIGGER_RADIUS: int = 2
    SCHEDULING_AVAILABILITY_RADIUS: int = 3
    SCHEDULING_DEFAULT_DURATION_MINUTES: int = 30
    SCHEDULING_MEETING_LOCATION: str = "Virtual"
    SCHEDULING_CONFIDENCE_FLOOR: float = 0.5
    SCHEDULING_CONFIDENCE_CAP: float = 0.95
    SCHEDULING_CONFIDENCE_STEP: float = 0.15

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def firebase_issuer(self) -> str | None:
        """Issuer claim expected on Firebase ID tokens for this project."""
        if not self.FIREBASE_PROJECT_ID:
            return None
        return f"https://securetoken.google.com/{self.FIREBASE_PROJECT_ID}"

    def topic_enrichment_enabled(self) -> bool:
        return self.PROACTIVE_TOPIC_ENRICHMENT and bool(self.OPENAI_API_KEY)

    def get_db_pool_config(self) -> dict:
        """
        Get database pool configuration.
        Adjust environment-specific settings based on self.environment.
        """
        config = {
            "min_size": self.DB_POOL_MIN_SIZE,
            "max_size": self.DB_POOL_MAX_SIZE,
            "timeout": self.DB_POOL_TIMEOUT,
            "max_idle": self.DB_POOL_MAX_IDLE,
            "max_lifetime": self.DB_POOL_MAX_LIFETIME,
        }

        if self.environment == "development":
            config.update({"min_size": 1, "max_size": 4, "timeout": 15.0})

        return config

    def scheduling_config(self) -> SchedulingConfig:
        """Build the immutable configuration handed to the scheduling coordinator."""
        return SchedulingConfig(
            timezone=self.SCHEDULING_TIMEZONE,
            trigger_radius=self.SCHEDULING_TRIGGER_RADIUS,
            availability_radius=self.SCHEDULING_AVAILABILITY_RADIUS,
            default_duration_minutes=self.SCHEDULING_DEFAULT_DURATION_MINUTES,
            meeting_location=self.SCHEDULING_MEETING_LOCATION,
            confidence_floor=self.SCHEDULING_CONFIDENCE_FLOOR,
            confidence_cap=self.SCHEDULING_CONFIDENCE_CAP,
            confidence_step=self.SCHEDULING_CONFIDENCE_STEP,
        )


settings = Settings()

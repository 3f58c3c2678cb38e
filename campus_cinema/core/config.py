from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Campus Cinema API"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = "changeme"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    ADMIN_SECRET_KEY: str = "change-this-admin-secret"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "campus_cinema"
    POSTGRES_PORT: int = 5432
    # Leave empty to build the URL from the POSTGRES_* values.
    # Any SQLAlchemy URL works, e.g. sqlite:///./cinema.db for local runs.
    DATABASE_URL: str = ""

    LOG_LEVEL: str = "INFO"

    # Past schedules are deactivated by a background task; 0 disables it
    SCHEDULE_CLEANUP_INTERVAL_SECONDS: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def uses_postgres(self) -> bool:
        return self.DATABASE_URL.startswith("postgresql")


settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()

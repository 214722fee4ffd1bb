from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file into environment BEFORE any settings classes are instantiated
load_dotenv()


class SchedulerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    interval_minutes: int = Field(default=60, description="Minutes between strategy runs")
    start_immediately: bool = Field(default=True, description="Run once before the first tick")
    max_runs: int = Field(default=-1, description="Stop after this many runs (-1 = unlimited)")
    timezone: str = Field(default="UTC", description="Timezone for the interval scheduler")


class AgentSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AGENT_")

    # "package.module:function" reference to the async strategy-selection routine
    entrypoint: str = Field(default="", description="Agent entry point reference")


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Log level: DEBUG|INFO|WARNING|ERROR")
    format: str = Field(default="console", description="json|console")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables (handled by nested settings)
    )

    environment: str = Field(default="development", description="development|staging|production")
    debug: bool = False

    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    agent: AgentSettings = Field(default_factory=AgentSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


settings = Settings()

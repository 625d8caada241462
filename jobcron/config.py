"""Library settings loaded from environment variables."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """jobcron defaults. Explicit ``Scheduler`` arguments take precedence."""

    # Poll loop
    poll_interval_seconds: float = Field(default=0.01, gt=0)

    # Timezone used to evaluate cron fields
    scheduler_timezone: str = Field(default="UTC")

    model_config = SettingsConfigDict(env_prefix="JOBCRON_")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)


settings = Settings()

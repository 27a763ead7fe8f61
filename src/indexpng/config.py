from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    DEFAULT_DEPTH: int = 10
    CHECK_BOUNDS: bool = False

    model_config = {
        "env_prefix": "INDEXPNG_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


settings = Settings()

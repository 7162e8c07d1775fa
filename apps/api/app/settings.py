from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Gateway
    google_api_key: str | None = None
    text_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash-image"
    gateway_timeout: float = 120.0
    # 1 means a single attempt; failures surface to the user unretried
    gateway_max_retries: int = 1

    # Serve the bundled example case instead of calling the gateway.
    # Also used when no API key is configured.
    demo_mode: bool = False

    # Sessions
    max_sessions: int = 100
    max_upload_bytes: int = 20 * 1024 * 1024

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = True

    # CORS - accepts comma-separated origins or "*" for allow-all
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_all: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()

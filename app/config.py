from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # AI provider (Mistral chat-completions)
    mistral_api_key: str = ""
    ai_provider_endpoint: str = "https://api.mistral.ai/v1/chat/completions"
    ai_provider_model: str = "mistral-large-latest"
    ai_provider_timeout: float = 30.0  # seconds

    # Tools are off by default; with them on, tool results go back to the model
    ai_tools_enabled: bool = False

    # Booking policy defaults applied when the traveler leaves them unspecified
    booking_default_class: str = "economy"
    booking_default_passengers: int = 1
    booking_default_max_budget: float = 5000.0

    # Logging
    log_level: str = "INFO"
    log_provider_responses: bool = False

    # CORS
    cors_origins: str = "http://localhost:5173"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()

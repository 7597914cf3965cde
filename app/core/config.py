from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    WHATSAPP_VERIFY_TOKEN: str = ""
    WHATSAPP_APP_SECRET: str | None = None
    WHATSAPP_ACCESS_TOKEN: str | None = None
    WHATSAPP_PHONE_NUMBER_ID: str | None = None
    WHATSAPP_GRAPH_API_VERSION: str = "v18.0"

    SALON_CONFIG_PATH: str = "./config/salon.json"
    APPOINTMENTS_PATH: str = "./data/appointments.json"

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    AUTO_REPLY_ENABLED: bool = False

    CONVERSATION_IDLE_TIMEOUT_MINUTES: int = 120  # 0 disables expiry
    SLOT_SUGGESTION_LIMIT: int = 3

    AFFIRMATIVE_TOKENS: list[str] = ["si", "sí", "yes"]
    CONFIRM_TOKENS: list[str] = ["confirma", "confirm"]
    REJECT_TOKENS: list[str] = ["rechaza", "cancelar", "cancel", "no"]
    ANY_STAFF_TOKENS: list[str] = ["indiferente", "cualquier"]


settings = Settings()

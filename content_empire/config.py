import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    bot_token: str = os.getenv("BOT_TOKEN", "")
    bot_username: str = os.getenv("BOT_USERNAME", "")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./app.db")
    # Access key for the hosted store; injected as the URL password when set
    database_key: str = os.getenv("DATABASE_KEY", "")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT") or "3000")
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")
    queue_cron: str = os.getenv("QUEUE_CRON", "* * * * *")
    queue_delay_seconds: int = int(os.getenv("QUEUE_DELAY_SECONDS") or "60")
    pending_limit: int = int(os.getenv("PENDING_LIMIT") or "20")
    telegram_api_base: str = os.getenv("TELEGRAM_API_BASE", "https://api.telegram.org")
    poll_timeout: int = int(os.getenv("POLL_TIMEOUT") or "30")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

settings = Settings()

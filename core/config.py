from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Mailroom"
    DATABASE_URL: str = "sqlite+aiosqlite:///./mailroom.db"
    DATABASE_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    ADMIN_USERNAME: str
    ADMIN_PASSWORD: str

    RESEND_API_KEY: str = ""
    RESEND_API_URL: str = "https://api.resend.com/emails"
    MAIL_FROM: str = "Mailroom <noreply@mailroom.dev>"
    EMAIL_LIST_LIMIT: int = 100

    IMAP_HOST: Optional[str] = None
    IMAP_PORT: int = 993
    IMAP_USER: Optional[str] = None
    IMAP_PASSWORD: Optional[str] = None
    IMAP_PASSWORD_ENCRYPTED: Optional[str] = None
    IMAP_POLL_INTERVAL: int = 30
    FERNET_KEY: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()

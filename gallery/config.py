from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./data/db.sqlite3"
    sqlite_busy_timeout: float = 30.0
    api_key: str = ""  # empty = no auth check (local dev)
    storage_dir: str = "./data/storage"
    storage_bucket: str = "photos"
    public_base_url: str = "http://localhost:8000"
    max_upload_bytes: int = 8 * 1024 * 1024  # 8MB
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]
    secret_key: str = "dev-secret-key-change-in-production"
    magic_link_ttl_minutes: int = 15
    session_ttl_minutes: int = 60 * 24 * 7
    admin_emails: list[str] = []  # empty = any address may sign in
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()

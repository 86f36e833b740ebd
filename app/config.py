from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./rental.sqlite3"
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 24 * 60
    default_page_size: int = 10
    max_page_size: int = 100
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Admin account created on first startup so that /auth/login works
    seed_admin_email: str = "admin@example.com"
    seed_admin_password: str = "admin123"
    seed_admin_name: str = "Administrador"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()

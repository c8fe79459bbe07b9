"""Настройки конфигурации приложения."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Загружает настройки из переменных окружения и файла .env.

    Атрибуты:
        model_config: Конфигурация для Pydantic моделей.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # База данных
    # Полный async-URL SQLAlchemy; если не задан, используется SQLite из DB_PATH
    DATABASE_URL: str | None = None
    DB_PATH: str = "database/products.db"
    SQL_ECHO: bool = False

    # HTTP-сервер
    HOST: str = "0.0.0.0"  # noqa: B104
    PORT: int = 3000
    CORS_ORIGINS: list[str] = ["*"]
    # Каталог со статикой браузерного интерфейса (монтируется, если существует)
    STATIC_DIR: str = "public_html"

    LOG_LEVEL: str = "INFO"

    # Заполнять пустую таблицу эталонными товарами при старте
    SEED_ON_STARTUP: bool = False

    @property
    def database_url(self) -> str:
        """
        Собирает строку подключения для асинхронного движка.

        Returns:
            Строка подключения для SQLAlchemy.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite+aiosqlite:///{self.DB_PATH}"

    @property
    def sync_database_url(self) -> str:
        """
        Строка подключения с синхронным драйвером (для Alembic).

        Returns:
            Строка подключения без async-драйвера.
        """
        return (
            self.database_url.replace("+aiosqlite", "")
            .replace("+asyncpg", "+psycopg2")
        )


settings = Settings()

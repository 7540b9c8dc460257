"""
Конфигурационные параметры для работы с API системы управления учебным заведением.
"""

from pathlib import Path  # Для построения пути к .env в корне проекта

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CampusAdminConfig(BaseSettings):
    """
    Настройки для подключения к API.
    Читаются из переменных окружения или .env файла.

    Attributes:
        api_url: Базовый URL REST API (с суффиксом /api)
        page_limit: Размер страницы для списочных запросов
        timeout: Таймаут запроса в секундах
        verify_ssl: Проверять SSL сертификаты
        token_file: Файл, в котором CLI хранит bearer-токен между запусками
        login_route: Маршрут входа, на который перенаправляем при 401
        notification_duration: Время жизни уведомления об успехе в секундах
        notification_tick: Шаг обратного отсчёта индикатора уведомления в секундах
        max_upload_size: Максимальный размер загружаемого файла в байтах
    """

    api_url: str = Field("http://localhost:5000/api", alias="CAMPUS_ADMIN_API_URL")
    page_limit: int = Field(10, ge=1, le=100)
    timeout: int = Field(60, alias="CAMPUS_ADMIN_TIMEOUT", ge=1, le=3600)
    verify_ssl: bool = Field(True, alias="CAMPUS_ADMIN_VERIFY_SSL")
    token_file: Path = Field(Path.home() / ".campus_admin" / "token", alias="CAMPUS_ADMIN_TOKEN_FILE")
    login_route: str = "/login"

    # 30 тиков по 100 мс -> 3 секунды
    notification_duration: float = Field(3.0, gt=0)
    notification_tick: float = Field(0.1, gt=0)

    max_upload_size: int = 5 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_prefix="CAMPUS_ADMIN_",
        # Сначала ищем .env в текущей директории, затем в корне проекта
        env_file=(
            ".env",
            str(Path(__file__).parent.parent / ".env"),
        ),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def base_url(self) -> str:
        """
        URL API с завершающим слэшем (нужен aiohttp для относительных путей).
        """
        return self.api_url.rstrip("/") + "/"

    @property
    def static_base_url(self) -> str:
        """
        Корень сервера для статических файлов: URL API без суффикса /api.
        """
        url = self.api_url.rstrip("/")
        if url.endswith("/api"):
            url = url[: -len("/api")]
        return url

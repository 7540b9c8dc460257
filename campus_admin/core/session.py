"""
Хранилища bearer-токена сессии.
"""

import logging
from pathlib import Path
from typing import Optional, Union


logger = logging.getLogger("campus_admin.session")


class MemoryTokenStore:
    """
    Токен в памяти процесса. Используется библиотекой и тестами.
    """

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """
    Токен в файле на диске, чтобы CLI переживал перезапуск.

    Attributes:
        path: Путь к файлу токена
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def get_token(self) -> Optional[str]:
        if not self.path.is_file():
            return None
        token = self.path.read_text(encoding="utf-8").strip()
        return token or None

    def set_token(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")
        logger.debug(f"Токен сохранён в {self.path}")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.debug(f"Токен удалён из {self.path}")

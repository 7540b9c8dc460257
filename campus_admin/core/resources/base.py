"""
Базовые ресурсные классы для API учебного заведения.
"""

from typing import Any, Dict, List, Optional, Type, TypeVar, Union

import aiohttp

from campus_admin.models import ListPage


T = TypeVar("T")

RecordId = Union[int, str]


class BaseResource:
    """
    Базовый класс для всех ресурсных групп API.

    Attributes:
        client: Родительский клиент API
        path: Путь ресурса относительно базового URL API, например `config/lab-categories`
    """

    path: str = ""

    def __init__(self, client):
        """
        Инициализирует ресурс с родительским клиентом.

        Args:
            client: Экземпляр CampusAdminClient
        """

        self._client = client

    @property
    def client(self):
        """
        Возвращает родительский клиент API.

        Returns:
            CampusAdminClient: Клиент API
        """
        return self._client

    def _url(self, *parts: Any) -> str:
        return "/".join([self.path, *(str(part) for part in parts)])

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        response_model: Optional[Type[T]] = None,
    ) -> Union[T, Dict[str, Any], List[Dict[str, Any]]]:
        """
        Выполняет API запрос через родительский клиент.

        Args:
            method: HTTP метод
            endpoint: URL эндпоинта
            params: URL параметры
            data: Данные для отправки (dict для JSON или aiohttp.FormData)
            headers: HTTP заголовки
            response_model: Модель для валидации ответа

        Returns:
            Union[T, Dict[str, Any], List[Dict[str, Any]]]: Ответ API
        """
        return await self.client._request(
            method=method,
            endpoint=endpoint,
            params=params,
            data=data,
            headers=headers,
            response_model=response_model,
        )


class CrudResource(BaseResource):
    """
    Стандартная группа `/{domain}/{resource}`: список, чтение, создание, обновление, удаление.

    Attributes:
        multipart: Ресурс принимает multipart/form-data (есть вложение)
    """

    multipart: bool = False

    async def get_all(self, **params: Any) -> ListPage:
        """
        Получает страницу записей.

        Args:
            **params: Параметры запроса (`page`, `limit`, `search`, фильтры)

        Returns:
            ListPage: Записи и состояние пагинации
        """
        query = {key: value for key, value in params.items() if value is not None}
        return await self._request("GET", self.path, params=query or None, response_model=ListPage)

    async def get_by_id(self, record_id: RecordId) -> Dict[str, Any]:
        """
        Получает одну запись по идентификатору.

        Сервер заворачивает запись в `{data: {...}}`, разворачиваем.
        """
        result = await self._request("GET", self._url(record_id))
        if isinstance(result, dict) and isinstance(result.get("data"), dict):
            return result["data"]
        return result

    async def create(self, data: Any) -> Dict[str, Any]:
        return await self._request("POST", self.path, data=data)

    async def update(self, record_id: RecordId, data: Any) -> Dict[str, Any]:
        return await self._request("PUT", self._url(record_id), data=data)

    async def delete(self, record_id: RecordId) -> Dict[str, Any]:
        return await self._request("DELETE", self._url(record_id))


class AllMixin:
    """Эндпоинт `/all`: полный список без пагинации (для выпадающих списков)."""

    async def get_all_simple(self) -> ListPage:
        return await self._request("GET", self._url("all"), response_model=ListPage)


class StatsMixin:
    """Эндпоинт `/stats/overview`."""

    async def get_stats(self) -> Dict[str, Any]:
        return await self._request("GET", self._url("stats", "overview"))


class UploadMixin:
    """
    Отдельная загрузка файла: POST `/upload` с полем `file`.
    """

    async def upload_file(self, upload) -> Dict[str, Any]:
        """
        Args:
            upload: UploadFile с содержимым файла

        Returns:
            Dict[str, Any]: Ответ сервера с именем сохранённого файла
        """
        form = aiohttp.FormData()
        form.add_field("file", upload.content, filename=upload.filename, content_type=upload.content_type)
        return await self._request("POST", self._url("upload"), data=form)

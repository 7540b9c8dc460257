"""
Конфигурация pytest и общие фикстуры для тестов.

Вместо настоящего сервера поднимается фейковый бэкенд на aiohttp.web:
он хранит записи в памяти, поддерживает пагинацию, поиск, JSON и
multipart, и запоминает все запросы для проверок.
"""

import asyncio
import math
from typing import Any, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from campus_admin.config import CampusAdminConfig
from campus_admin.core.client import CampusAdminClient
from campus_admin.core.session import MemoryTokenStore
from campus_admin.services import NotificationCenter, create_controller


TOKEN = "test-token"

# Куда сервер кладёт ссылку на загруженный файл
UPLOAD_FIELDS = {
    "config/organisation": ("logo", "logo_url", "delete_logo", "/uploads/logos/{}"),
    "faculty/academic-bodies": ("uploadFile", "upload_file", "delete_file", "{}"),
    "faculty/patent-innovation": ("uploadFile", "upload_file", "delete_file", "{}"),
}


class FakeBackend:
    """
    Фейковый REST API учебного заведения.

    Attributes:
        collections: Записи по пути ресурса (`config/lab-categories`)
        requests: Журнал запросов (метод, путь, query, заголовки)
        last_form: Поля последнего multipart-запроса; файлы как ("file", имя)
        search_delays: Задержка ответа списка по строке поиска
        token: Ожидаемый bearer-токен; None отключает проверку
    """

    def __init__(self):
        self.collections: Dict[str, Dict[int, Dict[str, Any]]] = {}
        self.requests: List[Tuple[str, str, Dict[str, str], Dict[str, str]]] = []
        self.last_form: Optional[Dict[str, Any]] = None
        self.search_delays: Dict[str, float] = {}
        self.token: Optional[str] = TOKEN
        self._failures: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self._next_id = 1
        self.server: Optional[TestServer] = None

    def seed(self, path: str, *records: Dict[str, Any]) -> List[Dict[str, Any]]:
        collection = self.collections.setdefault(path, {})
        created = []
        for record in records:
            item = dict(record)
            item.setdefault("id", self._take_id())
            collection[item["id"]] = item
            created.append(item)
        return created

    def fail_next(self, method: str, path: str, status: int, body: Any) -> None:
        self._failures[(method, path)] = (status, body)

    def count(self, method: Optional[str] = None) -> int:
        return len([r for r in self.requests if method is None or r[0] == method])

    @property
    def api_url(self) -> str:
        return str(self.server.make_url("/api"))

    def make_app(self) -> web.Application:
        app = web.Application(middlewares=[self._middleware])
        app.router.add_get("/api/{domain}/{resource}", self._list)
        app.router.add_post("/api/{domain}/{resource}", self._create)
        app.router.add_get("/api/{domain}/{resource}/{id}", self._get)
        app.router.add_put("/api/{domain}/{resource}/{id}", self._update)
        app.router.add_delete("/api/{domain}/{resource}/{id}", self._delete)
        return app

    def _take_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    @web.middleware
    async def _middleware(self, request: web.Request, handler):
        path = request.path[len("/api/"):]
        self.requests.append((request.method, path, dict(request.query), dict(request.headers)))

        if self.token is not None and request.headers.get("Authorization") != f"Bearer {self.token}":
            return web.json_response({"message": "Unauthorized"}, status=401)

        resource = "/".join(path.split("/")[:2])
        failure = self._failures.pop((request.method, resource), None)
        if failure is not None:
            status, body = failure
            return web.json_response(body, status=status)
        return await handler(request)

    @staticmethod
    def _path(request: web.Request) -> str:
        return f"{request.match_info['domain']}/{request.match_info['resource']}"

    def _record(self, request: web.Request) -> Dict[str, Any]:
        collection = self.collections.get(self._path(request), {})
        try:
            return collection[int(request.match_info["id"])]
        except (KeyError, ValueError):
            raise web.HTTPNotFound(
                text='{"message": "Record not found"}', content_type="application/json"
            ) from None

    async def _list(self, request: web.Request) -> web.Response:
        records = list(self.collections.get(self._path(request), {}).values())
        search = request.query.get("search", "")
        if search in self.search_delays:
            await asyncio.sleep(self.search_delays[search])
        if search:
            needle = search.lower()
            records = [r for r in records if any(needle in str(v).lower() for v in r.values() if isinstance(v, str))]

        page = int(request.query.get("page", 1))
        limit = int(request.query.get("limit", 10))
        total_pages = max(1, math.ceil(len(records) / limit))
        chunk = records[(page - 1) * limit : page * limit]
        return web.json_response(
            {
                "data": chunk,
                "pagination": {
                    "currentPage": page,
                    "totalPages": total_pages,
                    "totalCount": len(records),
                    "hasNext": page < total_pages,
                    "hasPrev": page > 1,
                },
            }
        )

    async def _get(self, request: web.Request) -> web.Response:
        return web.json_response({"data": self._record(request)})

    async def _create(self, request: web.Request) -> web.Response:
        path = self._path(request)
        record = {"id": self._take_id()}
        record.update(await self._read_body(request, path))
        self.collections.setdefault(path, {})[record["id"]] = record
        return web.json_response(record, status=201)

    async def _update(self, request: web.Request) -> web.Response:
        record = self._record(request)
        record.update(await self._read_body(request, self._path(request)))
        return web.json_response(record)

    async def _delete(self, request: web.Request) -> web.Response:
        record = self._record(request)
        del self.collections[self._path(request)][record["id"]]
        return web.json_response({"message": "Deleted"})

    async def _read_body(self, request: web.Request, path: str) -> Dict[str, Any]:
        if not request.content_type.startswith("multipart/"):
            return await request.json()

        form = await request.post()
        self.last_form = {}
        data: Dict[str, Any] = {}
        field, record_field, delete_flag, template = UPLOAD_FIELDS.get(path, (None, None, None, None))
        for name, value in form.items():
            if isinstance(value, web.FileField):
                self.last_form[name] = ("file", value.filename)
                if name == field:
                    data[record_field] = template.format(value.filename)
                continue
            self.last_form[name] = value
            if name == delete_flag:
                if value == "true":
                    data[record_field] = None
                continue
            data[name] = value
        return data


@pytest_asyncio.fixture
async def backend():
    """Запущенный фейковый бэкенд."""
    fake = FakeBackend()
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.server = server
    yield fake
    await server.close()


@pytest.fixture
def settings(backend) -> CampusAdminConfig:
    """Настройки клиента, указывающие на фейковый бэкенд."""
    return CampusAdminConfig(
        api_url=backend.api_url,
        notification_duration=0.2,
        notification_tick=0.01,
        _env_file=None,
    )


@pytest.fixture
def token_store() -> MemoryTokenStore:
    return MemoryTokenStore(TOKEN)


@pytest_asyncio.fixture
async def client(settings, token_store):
    """Клиент API, подключённый к фейковому бэкенду."""
    async with CampusAdminClient(settings, token_store=token_store) as api_client:
        yield api_client


@pytest.fixture
def notifications():
    center = NotificationCenter(duration=2.0, tick=0.1)
    yield center
    center.close()


@pytest.fixture
def make_controller(client, notifications):
    """Фабрика контроллеров с общим сервисом уведомлений."""
    controllers = []

    def _make(name: str, confirm=None):
        controller = create_controller(client, name, notifications, confirm=confirm)
        controllers.append(controller)
        return controller

    yield _make
    for controller in controllers:
        controller.close()


@pytest.fixture
def valid_program() -> Dict[str, Any]:
    """Черновик программы, проходящий все проверки."""
    return {
        "program_type_id": "1",
        "program_mode_id": "2",
        "specializations": "AI, Data Science, ",
        "acronym": "BTECH",
        "title": "Bachelor of Technology",
        "program_min_duration": 4,
        "program_max_duration": 4,
        "duration_unit": "years",
        "term_min_duration": "15",
        "term_max_duration": "18",
        "total_semesters": 8,
        "total_credits": 160,
        "term_min_credits": "16",
        "term_max_credits": "24",
        "nba_sar_type": "Tier-I",
        "course_types": "Core,Elective",
        "number_of_topics": "5",
        "is_active": True,
    }

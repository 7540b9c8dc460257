"""
Клиент для работы с REST API системы управления учебным заведением.
"""

import asyncio
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union

import aiohttp
from pydantic import BaseModel, ValidationError

from campus_admin.core.resources import (
    AcademicBodiesResource,
    AwardsHonorsResource,
    BloomsResource,
    BosMembersResource,
    COPOMappingResource,
    CourseOutcomesResource,
    CourseTypesResource,
    CoursesResource,
    CurriculumRegulationsResource,
    CurriculumSettingsResource,
    DeliveryMethodsResource,
    DepartmentsResource,
    FacultyTypesResource,
    FacultyWorkloadResource,
    FellowshipScholarshipResource,
    LabCategoriesResource,
    OrganisationResource,
    PatentInnovationResource,
    PEOsResource,
    POPEOMappingResource,
    ProfessionalBodiesResource,
    ProgramModesResource,
    ProgramOutcomesResource,
    ProgramsResource,
    ProgramTypesResource,
    ResearchProjectsResource,
    ResearchPublicationsResource,
    SeminarTrainingResource,
    TermDetailsResource,
    TopicsResource,
    UsersResource,
    WeightageResource,
)
from campus_admin.utils import CustomJSONEncoder, parse_error_response

from ..config import CampusAdminConfig
from ..exceptions import (
    CampusAdminAPIError,
    CampusAdminAuthError,
    CampusAdminConnectionError,
    CampusAdminTimeoutError,
)
from .session import MemoryTokenStore


# Настройка логгера
logger = logging.getLogger("campus_admin")

T = TypeVar("T")


class CampusAdminClient:
    """
    Асинхронный клиент REST API учебного заведения.

    Каждый вызов выполняется ровно один раз: без повторов, без кэша.
    При ответе 401 токен очищается, вызывается `on_unauthorized`
    с маршрутом входа, и выбрасывается CampusAdminAuthError.

    Attributes:
        settings: Настройки подключения к API
        token_store: Хранилище bearer-токена
        on_unauthorized: Обработчик потери сессии (переход на страницу входа)
    """

    def __init__(
        self,
        settings: Optional[CampusAdminConfig] = None,
        token_store=None,
        on_unauthorized: Optional[Callable[[str], None]] = None,
    ):
        """
        Инициализация клиента.

        Args:
            settings: Настройки подключения к API. Если не указаны,
                      будут использованы настройки по умолчанию.
            token_store: Хранилище токена (MemoryTokenStore или FileTokenStore)
            on_unauthorized: Вызывается с `settings.login_route` при ответе 401
        """
        self.settings = settings or CampusAdminConfig()
        self.token_store = token_store if token_store is not None else MemoryTokenStore()
        self.on_unauthorized = on_unauthorized
        self._session: Optional[aiohttp.ClientSession] = None

        # Справочники
        self.organisation = OrganisationResource(self)
        self.departments = DepartmentsResource(self)
        self.program_types = ProgramTypesResource(self)
        self.program_modes = ProgramModesResource(self)
        self.faculty_types = FacultyTypesResource(self)
        self.programs = ProgramsResource(self)
        self.users = UsersResource(self)
        self.bos_members = BosMembersResource(self)
        self.course_types = CourseTypesResource(self)
        self.delivery_methods = DeliveryMethodsResource(self)
        self.lab_categories = LabCategoriesResource(self)
        self.weightage = WeightageResource(self)
        self.faculty_workload = FacultyWorkloadResource(self)
        self.fellowship_scholarship = FellowshipScholarshipResource(self)

        # Учебный план
        self.blooms = BloomsResource(self)
        self.curriculum_regulations = CurriculumRegulationsResource(self)
        self.peos = PEOsResource(self)
        self.program_outcomes = ProgramOutcomesResource(self)
        self.po_peo_mapping = POPEOMappingResource(self)
        self.curriculum_settings = CurriculumSettingsResource(self)
        self.courses = CoursesResource(self)
        self.course_outcomes = CourseOutcomesResource(self)
        self.co_po_mapping = COPOMappingResource(self)
        self.term_details = TermDetailsResource(self)
        self.topics = TopicsResource(self)

        # Преподаватели
        self.awards_honors = AwardsHonorsResource(self)
        self.academic_bodies = AcademicBodiesResource(self)
        self.patent_innovation = PatentInnovationResource(self)
        self.professional_bodies = ProfessionalBodiesResource(self)
        self.research_projects = ResearchProjectsResource(self)
        self.research_publications = ResearchPublicationsResource(self)
        self.seminar_training = SeminarTrainingResource(self)

    async def __aenter__(self) -> "CampusAdminClient":
        """
        Асинхронный контекстный менеджер для инициализации сессии.

        Returns:
            CampusAdminClient: Экземпляр клиента
        """
        if not self._session:
            await self._create_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """
        Асинхронный контекстный менеджер для закрытия сессии.
        """
        await self.close()

    async def _create_session(self) -> None:
        """
        Создает новую HTTP-сессию.
        """
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout)
        self._session = aiohttp.ClientSession(timeout=timeout)

    async def close(self) -> None:
        """
        Закрывает HTTP-сессию.
        """
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """
        Текущая HTTP-сессия.

        Raises:
            RuntimeError: Если клиент не инициализирован через контекстный менеджер
        """
        if self._session is None or self._session.closed:
            raise RuntimeError("HTTP сессия не инициализирована. Используйте 'async with' контекст")
        return self._session

    def _get_headers(self, multipart: bool = False) -> Dict[str, str]:
        """
        Формирует заголовки для запросов к API.

        Для multipart Content-Type не задаём: boundary выставит aiohttp.

        Returns:
            Dict[str, str]: Заголовки запроса
        """
        headers = {"Accept": "application/json"}
        if not multipart:
            headers["Content-Type"] = "application/json"

        token = self.token_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _handle_unauthorized(self) -> None:
        """
        Глобальная обработка 401: очищаем токен и уходим на страницу входа.
        """
        logger.warning(f"Сессия недействительна, переход на {self.settings.login_route}")
        self.token_store.clear()
        if self.on_unauthorized is not None:
            self.on_unauthorized(self.settings.login_route)

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
        Выполняет HTTP-запрос к API.

        Args:
            method: HTTP-метод (GET, POST, PUT, PATCH, DELETE)
            endpoint: Конечная точка API относительно базового URL
            params: URL-параметры запроса
            data: Тело запроса: dict/модель (JSON), aiohttp.FormData или MultipartWriter (multipart)
            headers: Дополнительные заголовки
            response_model: Pydantic-модель для валидации ответа

        Returns:
            Union[T, Dict[str, Any], List[Dict[str, Any]]]: Ответ API

        Raises:
            CampusAdminAuthError: При ответе 401
            CampusAdminAPIError: В случае ошибки API
            CampusAdminConnectionError: При ошибке соединения
            CampusAdminTimeoutError: При таймауте запроса
        """
        if not self._session or self._session.closed:
            await self._create_session()

        multipart = isinstance(data, (aiohttp.FormData, aiohttp.MultipartWriter))
        request_headers = self._get_headers(multipart=multipart)
        if headers:
            request_headers.update(headers)

        # Если данные - это экземпляр Pydantic модели, то преобразуем его в словарь
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_none=True)

        if multipart:
            body = data
        else:
            body = json.dumps(data, cls=CustomJSONEncoder) if data is not None else None

        logger.debug(f"Запрос {method} {self.settings.base_url}{endpoint}")
        if params:
            logger.debug(f"Параметры запроса: {params}")
        if body is not None and not multipart:
            logger.debug(f"Данные запроса: {body[:200]}...")

        try:
            async with self.session.request(
                method=method,
                url=f"{self.settings.base_url}{endpoint}",
                params=params,
                data=body,
                headers=request_headers,
                ssl=self.settings.verify_ssl,
            ) as response:
                # 1. Проверяем на ошибки
                if response.status >= 400:
                    error_details = await parse_error_response(response)
                    logger.error(
                        f"Ошибка API: {error_details['status_code']} - {error_details['message']} (URL: {response.url})"
                    )
                    if response.status == 401:
                        self._handle_unauthorized()
                        raise CampusAdminAuthError(error_details["message"], error_details["data"])
                    raise CampusAdminAPIError(
                        status_code=error_details["status_code"],
                        message=error_details["message"],
                        response_data=error_details["data"],
                    )

                # 2. Обрабатываем успешный ответ без тела
                if response.status == 204:
                    return {}

                # 3. Если статус успешный и не 204, ожидаем JSON
                try:
                    response_data = await response.json()
                except (aiohttp.ContentTypeError, json.JSONDecodeError) as e:
                    response_text = await response.text()
                    logger.error(
                        f"Ошибка декодирования JSON: {e!s}. "
                        f"Статус: {response.status}. "
                        f"Текст ответа: '{response_text[:200]}...'"
                    )
                    raise CampusAdminAPIError(
                        status_code=response.status,
                        message=f"Ожидался JSON, но получен другой тип контента: {response.content_type}",
                        response_data=response_text,
                    ) from e

                if response_model:
                    try:
                        return response_model.model_validate(response_data)
                    except ValidationError as e:
                        logger.error(f"Ответ не соответствует модели {response_model.__name__}: {e!s}")
                        raise CampusAdminAPIError(
                            status_code=response.status,
                            message=f"Некорректный формат ответа: {e.error_count()} ошибок валидации",
                            response_data=response_data,
                        ) from e

                # Иначе возвращаем JSON как есть
                return response_data

        except aiohttp.ClientConnectionError as e:
            logger.error(f"Ошибка соединения: {e!s}")
            raise CampusAdminConnectionError(f"Ошибка соединения: {e!s}") from e
        except aiohttp.ClientResponseError as e:
            logger.error(f"Ошибка ответа: {e!s}")
            raise CampusAdminAPIError(status_code=e.status, message=str(e), response_data=None) from e
        except aiohttp.ClientError as e:
            logger.error(f"Ошибка клиента: {e!s}")
            raise CampusAdminAPIError(status_code=500, message=str(e), response_data=None) from e
        except asyncio.TimeoutError as e:
            logger.error(f"Таймаут запроса: {e!s}")
            raise CampusAdminTimeoutError(f"Таймаут запроса: {e!s}") from e

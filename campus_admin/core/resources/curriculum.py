"""
Ресурсы учебного плана: таксономия Блума, регламенты, PEO/PO, курсы, темы.
"""

from typing import Any, Dict, Optional

from campus_admin.models import ListPage

from .base import AllMixin, BaseResource, CrudResource, RecordId, StatsMixin


class CurriculumLookupMixin:
    """Справочник регламентов, доступных разделу."""

    async def get_curriculum_regulations(self) -> ListPage:
        return await self._request("GET", self._url("curriculum-regulations"), response_model=ListPage)


class BloomsResource(BaseResource):
    """
    Таксономия Блума: домены и уровни.
    """

    path = "config/blooms"

    async def get_domains(self, **params: Any) -> ListPage:
        return await self._request("GET", self._url("domains"), params=params or None, response_model=ListPage)

    async def get_domain_by_id(self, record_id: RecordId) -> Dict[str, Any]:
        return await self._request("GET", self._url("domains", record_id))

    async def create_domain(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", self._url("domains"), data=data)

    async def update_domain(self, record_id: RecordId, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", self._url("domains", record_id), data=data)

    async def delete_domain(self, record_id: RecordId) -> Dict[str, Any]:
        return await self._request("DELETE", self._url("domains", record_id))

    async def get_levels(self, **params: Any) -> ListPage:
        return await self._request("GET", self._url("levels"), params=params or None, response_model=ListPage)

    async def get_levels_by_domain(self, domain_id: RecordId) -> ListPage:
        # Сервер отдаёт уровни домена по тому же пути, что и уровень по ID
        return await self._request("GET", self._url("levels", domain_id), response_model=ListPage)

    async def create_level(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", self._url("levels"), data=data)

    async def update_level(self, record_id: RecordId, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", self._url("levels", record_id), data=data)

    async def delete_level(self, record_id: RecordId) -> Dict[str, Any]:
        return await self._request("DELETE", self._url("levels", record_id))


class CurriculumRegulationsResource(AllMixin, StatsMixin, CrudResource):
    path = "config/curriculum-regulations"

    async def update_peo_status(self, record_id: RecordId, status: str) -> Dict[str, Any]:
        return await self._request("PUT", self._url(record_id, "peo-status"), data={"peo_creation_status": status})

    async def check_peo_status(self, record_id: RecordId) -> Dict[str, Any]:
        return await self._request("GET", self._url(record_id, "peo-status"))


class PEOsResource(CurriculumLookupMixin, StatsMixin, CrudResource):
    path = "config/peos"


class ProgramOutcomesResource(CurriculumLookupMixin, StatsMixin, CrudResource):
    path = "config/program-outcomes"


class POPEOMappingResource(CurriculumLookupMixin, BaseResource):
    """
    Матрица соответствия PO и PEO для регламента.
    """

    path = "config/po-peo-mapping"

    async def get_matrix(self, curriculum_id: RecordId) -> Dict[str, Any]:
        return await self._request("GET", self._url("matrix", curriculum_id))

    async def create_mapping(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", self._url("mapping"), data=data)

    async def delete_mapping(self, curriculum_id: RecordId, po_id: RecordId, peo_id: RecordId) -> Dict[str, Any]:
        return await self._request("DELETE", self._url("mapping", curriculum_id, po_id, peo_id))

    async def get_stats(self, curriculum_id: RecordId) -> Dict[str, Any]:
        return await self._request("GET", self._url("stats", curriculum_id))


class CurriculumSettingsResource(CurriculumLookupMixin, BaseResource):
    """
    Настройки регламента: домены, методы обучения и оценивания.
    """

    path = "config/curriculum-settings"

    _SECTIONS = ("domains", "delivery-methods", "assessment-methods")

    async def get_settings(self, curriculum_id: RecordId) -> Dict[str, Any]:
        return await self._request("GET", self._url("settings", curriculum_id))

    async def create_item(self, section: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Создаёт элемент настроек.

        Args:
            section: Один из `domains`, `delivery-methods`, `assessment-methods`
            data: Поля элемента
        """
        self._check_section(section)
        return await self._request("POST", self._url(section), data=data)

    async def update_item(self, section: str, record_id: RecordId, data: Dict[str, Any]) -> Dict[str, Any]:
        self._check_section(section)
        return await self._request("PUT", self._url(section, record_id), data=data)

    async def delete_item(self, section: str, record_id: RecordId) -> Dict[str, Any]:
        self._check_section(section)
        return await self._request("DELETE", self._url(section, record_id))

    def _check_section(self, section: str) -> None:
        if section not in self._SECTIONS:
            raise ValueError(f"Неизвестный раздел настроек: {section}")


class CoursesResource(CurriculumLookupMixin, CrudResource):
    """Курсы и назначения преподавателей."""

    path = "config/courses"

    async def get_terms(self) -> ListPage:
        return await self._request("GET", self._url("terms"), response_model=ListPage)

    async def get_users(self) -> ListPage:
        return await self._request("GET", self._url("users"), response_model=ListPage)

    async def get_assignments(self, course_id: RecordId) -> ListPage:
        return await self._request("GET", self._url(course_id, "assignments"), response_model=ListPage)

    async def create_assignment(self, course_id: RecordId, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", self._url(course_id, "assignments"), data=data)

    async def update_assignment(self, assignment_id: RecordId, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", self._url("assignments", assignment_id), data=data)

    async def delete_assignment(self, assignment_id: RecordId) -> Dict[str, Any]:
        return await self._request("DELETE", self._url("assignments", assignment_id))


class CourseOutcomesResource(CrudResource):
    path = "config/course-outcomes"

    async def get_lookup_data(self, **params: Any) -> Dict[str, Any]:
        return await self._request("GET", self._url("lookup", "data"), params=params or None)


class COPOMappingResource(CrudResource):
    path = "config/co-po-mapping"


class TermDetailsResource(BaseResource):
    """
    Детали семестров регламента и их согласование.
    """

    path = "config/term-details"

    async def get_by_curriculum(self, curriculum_id: RecordId) -> ListPage:
        return await self._request("GET", self._url(curriculum_id), response_model=ListPage)

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", self.path, data=data)

    async def create_bulk(self, data: Any) -> Dict[str, Any]:
        return await self._request("POST", self._url("bulk"), data=data)

    async def submit_for_approval(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", self._url("submit-approval"), data=data)

    async def get_approvals(self, curriculum_id: RecordId) -> ListPage:
        return await self._request("GET", self._url("approvals", curriculum_id), response_model=ListPage)

    async def approve(self, approval_id: RecordId, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._request("PUT", self._url("approve", approval_id), data=data or {})

    async def reject(self, approval_id: RecordId, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._request("PUT", self._url("reject", approval_id), data=data or {})


class TopicsResource(CrudResource):
    path = "config/topics"

    async def get_tlos(self, topic_id: RecordId) -> ListPage:
        return await self._request("GET", self._url(topic_id, "tlos"), response_model=ListPage)

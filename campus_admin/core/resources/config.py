"""
Ресурсы раздела `/config`: справочники учебного заведения.
"""

import logging
from typing import Any, Dict

from .base import AllMixin, CrudResource, RecordId, StatsMixin


logger = logging.getLogger("campus_admin.resources.config")


class OrganisationResource(CrudResource):
    """Сведения об организации. Логотип передаётся в multipart."""

    path = "config/organisation"
    multipart = True


class DepartmentsResource(AllMixin, StatsMixin, CrudResource):
    """
    Кафедры и их миссия/видение.
    """

    path = "config/departments"

    async def get_vision_mission(self, department_id: RecordId) -> Dict[str, Any]:
        return await self._request("GET", self._url(department_id, "vision-mission"))

    async def create_vision_mission(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", self._url("vision-mission"), data=data)

    async def update_vision_mission(self, record_id: RecordId, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", self._url("vision-mission", record_id), data=data)

    async def delete_vision_mission(self, record_id: RecordId) -> Dict[str, Any]:
        return await self._request("DELETE", self._url("vision-mission", record_id))


class ProgramTypesResource(AllMixin, CrudResource):
    path = "config/program-types"


class ProgramModesResource(CrudResource):
    path = "config/program-modes"


class FacultyTypesResource(CrudResource):
    path = "config/faculty-types"


class ProgramsResource(AllMixin, CrudResource):
    path = "config/programs"


class UsersResource(AllMixin, CrudResource):
    """Пользователи (преподаватели и сотрудники)."""

    path = "config/users"

    async def deactivate(self, record_id: RecordId) -> Dict[str, Any]:
        """
        Деактивирует пользователя без удаления.

        Args:
            record_id: ID пользователя
        """
        logger.debug(f"Деактивация пользователя {record_id}")
        return await self._request("PATCH", self._url(record_id, "deactivate"))


class BosMembersResource(CrudResource):
    path = "config/bos-members"


class CourseTypesResource(CrudResource):
    path = "config/course-types"


class DeliveryMethodsResource(CrudResource):
    path = "config/delivery-methods"


class LabCategoriesResource(CrudResource):
    path = "config/lab-categories"


class WeightageResource(CrudResource):
    path = "config/weightage"


class FacultyWorkloadResource(CrudResource):
    path = "config/faculty-workload"


class FellowshipScholarshipResource(CrudResource):
    path = "config/fellowship-scholarship"
    multipart = True

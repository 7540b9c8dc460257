"""
Описания экранов администрирования: поля, правила проверки, вложения.

Строгость правил у ресурсов разная и сохраняется как есть.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .assets import IMAGE_TYPES, AssetSpec
from .controller import ConfirmCallback, ResourceController
from .notifications import NotificationCenter
from .schema import FieldKind, FieldSpec, ResourceSchema


@dataclass
class ResourceDefinition:
    """
    Описание одного экрана.

    Attributes:
        name: Ключ экрана и атрибут ресурса на клиенте
        label: Название записи в единственном числе для сообщений
        plural: Название во множественном числе для сообщений о загрузке
        schema: Поля формы
        asset: Вложение, если ресурс принимает файл
        columns: Поля для табличного вывода
    """

    name: str
    label: str
    plural: str
    schema: ResourceSchema
    asset: Optional[AssetSpec] = None
    columns: tuple = ()

    @property
    def resource_attr(self) -> str:
        return self.name


INT = FieldKind.INTEGER
BOOL = FieldKind.BOOLEAN


LAB_CATEGORIES = ResourceDefinition(
    name="lab_categories",
    label="Lab category",
    plural="lab categories",
    schema=ResourceSchema(
        [
            FieldSpec("category_name", "Category name", required=True, min_length=2, max_length=50),
            FieldSpec("description", "Description", max_length=500),
        ]
    ),
    columns=("id", "category_name", "description"),
)

PROGRAM_MODES = ResourceDefinition(
    name="program_modes",
    label="Program mode",
    plural="program modes",
    schema=ResourceSchema(
        [
            FieldSpec("mode_name", "Mode name", required=True, min_length=2, max_length=50),
            FieldSpec("description", "Description", max_length=500),
            FieldSpec("is_hybrid", "Hybrid", kind=BOOL, default=False),
            FieldSpec("is_online_sync", "Online synchronous", kind=BOOL, default=False),
            FieldSpec("is_online_async", "Online asynchronous", kind=BOOL, default=False),
        ]
    ),
    columns=("id", "mode_name", "is_hybrid", "is_online_sync", "is_online_async"),
)

DEPARTMENTS = ResourceDefinition(
    name="departments",
    label="Department",
    plural="departments",
    schema=ResourceSchema(
        [
            FieldSpec("department_name", "Department name", required=True, min_length=2),
            FieldSpec("short_name", "Short name", required=True, min_length=2),
            FieldSpec("chairman_name", "Chairman name"),
            FieldSpec("chairman_email", "Chairman email", kind=FieldKind.EMAIL),
            FieldSpec("chairman_phone", "Chairman phone", kind=FieldKind.PHONE),
            FieldSpec("journal_publications", "Journal publications", kind=INT, default=0, min_value=0),
            FieldSpec("magazine_publications", "Magazine publications", kind=INT, default=0, min_value=0),
            FieldSpec("is_first_year_department", "First year department", kind=BOOL, default=False),
        ]
    ),
    columns=("id", "department_name", "short_name", "chairman_name", "chairman_email"),
)

ORGANISATION = ResourceDefinition(
    name="organisation",
    label="Organisation details",
    plural="organisation details",
    schema=ResourceSchema(
        [
            FieldSpec("society_name", "Society name", required=True, min_length=2),
            FieldSpec("organisation_name", "Organisation name", required=True, min_length=2),
            FieldSpec("description", "Description"),
            FieldSpec("mission", "Mission", required=True, min_length=10),
            FieldSpec("vision", "Vision", required=True, min_length=10),
            FieldSpec("mandate", "Mandate"),
        ]
    ),
    asset=AssetSpec(
        field="logo",
        record_field="logo_url",
        delete_flag="delete_logo",
        url_prefix="/uploads/logos",
        accept=IMAGE_TYPES,
        image_only=True,
    ),
    columns=("id", "society_name", "organisation_name", "logo_url"),
)

PROGRAMS = ResourceDefinition(
    name="programs",
    label="Program",
    plural="programs",
    schema=ResourceSchema(
        [
            FieldSpec("program_type_id", "Program type", kind=INT, required=True),
            FieldSpec("program_mode_id", "Program mode", kind=INT, required=True),
            FieldSpec("acronym", "Acronym", required=True, min_length=2, max_length=10),
            FieldSpec("title", "Program title", required=True, min_length=3, max_length=100),
            FieldSpec("program_min_duration", "Minimum duration", kind=INT, default=4, min_value=1),
            FieldSpec(
                "program_max_duration",
                "Maximum duration",
                kind=INT,
                default=4,
                min_value=1,
                gte_field="program_min_duration",
            ),
            FieldSpec("duration_unit", "Duration unit", default="years"),
            FieldSpec("total_semesters", "Total semesters", kind=INT, default=8, min_value=1),
            FieldSpec("total_credits", "Total credits", kind=INT, default=120, min_value=1),
            FieldSpec("term_min_duration", "Term minimum duration", kind=INT, required=True, min_value=1),
            FieldSpec(
                "term_max_duration",
                "Term maximum duration",
                kind=INT,
                required=True,
                min_value=1,
                gte_field="term_min_duration",
                messages={"order": "{label} must be greater than or equal to minimum duration"},
            ),
            FieldSpec("term_min_credits", "Term minimum credits", kind=INT, required=True, min_value=1),
            FieldSpec(
                "term_max_credits",
                "Term maximum credits",
                kind=INT,
                required=True,
                min_value=1,
                gte_field="term_min_credits",
                messages={"order": "{label} must be greater than or equal to minimum credits"},
            ),
            FieldSpec("number_of_topics", "Number of topics", kind=INT, required=True, min_value=1),
            FieldSpec(
                "specializations",
                "Specializations",
                kind=FieldKind.LIST,
                required=True,
                messages={"required": "Specializations are required"},
            ),
            FieldSpec(
                "course_types",
                "Course types",
                kind=FieldKind.LIST,
                required=True,
                messages={"required": "Course types are required"},
            ),
            FieldSpec("nba_sar_type", "NBA SAR Type", required=True),
            FieldSpec("is_active", "Active", kind=BOOL, default=True),
        ]
    ),
    columns=("id", "acronym", "title", "program_min_duration", "program_max_duration", "is_active"),
)

USERS = ResourceDefinition(
    name="users",
    label="User",
    plural="users",
    schema=ResourceSchema(
        [
            FieldSpec("first_name", "First name", required=True),
            FieldSpec("last_name", "Last name", required=True),
            FieldSpec(
                "email",
                "Email",
                kind=FieldKind.EMAIL,
                required=True,
                unique=True,
                messages={"unique": "This email address is already in use"},
            ),
            FieldSpec("faculty_type_id", "Faculty type", kind=INT, required=True),
            FieldSpec("department_id", "Department", kind=INT, required=True),
            FieldSpec("aadhar_number", "Aadhar number", nullable=True),
            FieldSpec("title", "Title", nullable=True),
            FieldSpec("contact_number", "Contact number", nullable=True),
            FieldSpec("department_designation", "Department designation", nullable=True),
            FieldSpec("user_group", "User group", nullable=True),
            FieldSpec("highest_qualification", "Highest qualification", nullable=True),
            FieldSpec("experience_years", "Experience years", kind=INT, default=0, min_value=0),
            FieldSpec("is_active", "Active", kind=BOOL, default=True),
        ]
    ),
    columns=("id", "first_name", "last_name", "email", "is_active"),
)

ACADEMIC_BODIES = ResourceDefinition(
    name="academic_bodies",
    label="Academic body",
    plural="academic bodies",
    schema=ResourceSchema(
        [
            FieldSpec("memberOf", "Academic body name", required=True, min_length=2, max_length=100),
            FieldSpec("institution", "Institution name", required=True, min_length=2, max_length=100),
            FieldSpec("description", "Description", max_length=500),
        ]
    ),
    asset=AssetSpec(
        field="uploadFile",
        record_field="upload_file",
        delete_flag="delete_file",
        url_prefix="/uploads",
        mount="faculty",
    ),
    columns=("id", "memberOf", "institution", "upload_file"),
)

PATENT_INNOVATION = ResourceDefinition(
    name="patent_innovation",
    label="Patent/innovation record",
    plural="patent/innovation records",
    schema=ResourceSchema(
        [
            FieldSpec("title", "Title", required=True),
            FieldSpec("patentNo", "Patent number", required=True),
            FieldSpec("year", "Year", required=True),
            FieldSpec("status", "Status", required=True),
            FieldSpec("activityType", "Activity type", required=True),
            FieldSpec("abstract", "Abstract"),
        ]
    ),
    asset=AssetSpec(
        field="uploadFile",
        record_field="upload_file",
        delete_flag="delete_file",
        url_prefix="/uploads/patent-innovation",
        mount="faculty",
    ),
    columns=("id", "title", "patentNo", "year", "status"),
)


RESOURCE_DEFINITIONS: Dict[str, ResourceDefinition] = {
    definition.name: definition
    for definition in (
        LAB_CATEGORIES,
        PROGRAM_MODES,
        DEPARTMENTS,
        ORGANISATION,
        PROGRAMS,
        USERS,
        ACADEMIC_BODIES,
        PATENT_INNOVATION,
    )
}


def get_definition(name: str) -> ResourceDefinition:
    """
    Raises:
        ValueError: Экран с таким именем не описан
    """
    try:
        return RESOURCE_DEFINITIONS[name]
    except KeyError:
        known = ", ".join(sorted(RESOURCE_DEFINITIONS))
        raise ValueError(f"Неизвестный ресурс '{name}'. Доступные: {known}") from None


def create_controller(
    client,
    name: str,
    notifications: Optional[NotificationCenter] = None,
    confirm: Optional[ConfirmCallback] = None,
) -> ResourceController:
    """
    Создаёт контроллер экрана по имени ресурса.

    Args:
        client: CampusAdminClient
        name: Ключ экрана из RESOURCE_DEFINITIONS
        notifications: Общий сервис уведомлений; если не передан, создаётся из настроек клиента
        confirm: Подтверждение удаления

    Returns:
        ResourceController: Контроллер, привязанный к ресурсной группе клиента
    """
    definition = get_definition(name)
    if notifications is None:
        notifications = NotificationCenter.from_settings(client.settings)
    resource = getattr(client, definition.resource_attr)
    return ResourceController(resource, definition, notifications, settings=client.settings, confirm=confirm)

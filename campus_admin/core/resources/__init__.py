"""
Ресурсные классы для работы с различными разделами API учебного заведения.
"""

from .base import AllMixin, BaseResource, CrudResource, StatsMixin, UploadMixin
from .config import (
    BosMembersResource,
    CourseTypesResource,
    DeliveryMethodsResource,
    DepartmentsResource,
    FacultyTypesResource,
    FacultyWorkloadResource,
    FellowshipScholarshipResource,
    LabCategoriesResource,
    OrganisationResource,
    ProgramModesResource,
    ProgramsResource,
    ProgramTypesResource,
    UsersResource,
    WeightageResource,
)
from .curriculum import (
    BloomsResource,
    COPOMappingResource,
    CourseOutcomesResource,
    CoursesResource,
    CurriculumRegulationsResource,
    CurriculumSettingsResource,
    PEOsResource,
    POPEOMappingResource,
    ProgramOutcomesResource,
    TermDetailsResource,
    TopicsResource,
)
from .faculty import (
    AcademicBodiesResource,
    AwardsHonorsResource,
    PatentInnovationResource,
    ProfessionalBodiesResource,
    ResearchProjectsResource,
    ResearchPublicationsResource,
    SeminarTrainingResource,
)


__all__ = [
    "AllMixin",
    "BaseResource",
    "CrudResource",
    "StatsMixin",
    "UploadMixin",
    "AcademicBodiesResource",
    "AwardsHonorsResource",
    "BloomsResource",
    "BosMembersResource",
    "COPOMappingResource",
    "CourseOutcomesResource",
    "CourseTypesResource",
    "CoursesResource",
    "CurriculumRegulationsResource",
    "CurriculumSettingsResource",
    "DeliveryMethodsResource",
    "DepartmentsResource",
    "FacultyTypesResource",
    "FacultyWorkloadResource",
    "FellowshipScholarshipResource",
    "LabCategoriesResource",
    "OrganisationResource",
    "PEOsResource",
    "POPEOMappingResource",
    "PatentInnovationResource",
    "ProfessionalBodiesResource",
    "ProgramModesResource",
    "ProgramOutcomesResource",
    "ProgramTypesResource",
    "ProgramsResource",
    "ResearchProjectsResource",
    "ResearchPublicationsResource",
    "SeminarTrainingResource",
    "TermDetailsResource",
    "TopicsResource",
    "UsersResource",
    "WeightageResource",
]

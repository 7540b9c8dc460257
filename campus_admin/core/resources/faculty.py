"""
Ресурсы раздела `/faculty`: достижения и активность преподавателей.

Все ресурсы раздела принимают multipart/form-data с приложенным документом
и умеют загружать файл отдельно через `/upload`.
"""

from .base import CrudResource, UploadMixin


class FacultyResource(UploadMixin, CrudResource):
    multipart = True


class AwardsHonorsResource(FacultyResource):
    path = "faculty/awards-honors"
    # Награды отправляются JSON, файл грузится заранее через upload_file
    multipart = False


class AcademicBodiesResource(FacultyResource):
    path = "faculty/academic-bodies"


class PatentInnovationResource(FacultyResource):
    path = "faculty/patent-innovation"


class ProfessionalBodiesResource(FacultyResource):
    path = "faculty/professional-bodies"


class ResearchProjectsResource(FacultyResource):
    path = "faculty/research-projects"


class ResearchPublicationsResource(FacultyResource):
    path = "faculty/research-publications"


class SeminarTrainingResource(FacultyResource):
    path = "faculty/seminar-training"

"""
Тесты универсального контроллера на фейковом бэкенде.
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from campus_admin.exceptions import CampusAdminAPIError
from campus_admin.models import ListPage
from campus_admin.services import NotificationCenter, UploadFile
from campus_admin.services.controller import ResourceController
from campus_admin.services.definitions import LAB_CATEGORIES


LAB = "config/lab-categories"
ORGANISATION = "config/organisation"


def png(name="crest.png"):
    return UploadFile(filename=name, content=b"\x89PNG0000", content_type="image/png")


class TestList:
    @pytest.mark.asyncio
    async def test_list_replaces_records_and_pagination(self, backend, make_controller):
        backend.seed(LAB, *({"category_name": f"Lab {i}"} for i in range(12)))
        controller = make_controller("lab_categories")

        assert await controller.list(2)

        assert [r["category_name"] for r in controller.records] == ["Lab 10", "Lab 11"]
        assert controller.pagination.current_page == 2
        assert controller.pagination.total_pages == 2
        assert controller.pagination.has_prev is True
        assert controller.pagination.has_next is False
        assert controller.loading is False
        assert backend.requests[-1][2] == {"page": "2", "limit": "10"}

    @pytest.mark.asyncio
    async def test_search_resets_to_first_page(self, backend, make_controller):
        backend.seed(LAB, {"category_name": "Physics"}, {"category_name": "Chemistry"})
        controller = make_controller("lab_categories")

        await controller.search("phys")

        assert controller.search_term == "phys"
        assert [r["category_name"] for r in controller.records] == ["Physics"]
        assert backend.requests[-1][2] == {"page": "1", "limit": "10", "search": "phys"}

    @pytest.mark.asyncio
    async def test_change_page_keeps_search(self, backend, make_controller):
        controller = make_controller("lab_categories")
        await controller.search("lab")

        await controller.change_page(3)

        assert backend.requests[-1][2] == {"page": "3", "limit": "10", "search": "lab"}

    @pytest.mark.asyncio
    async def test_failed_fetch_keeps_state(self, backend, make_controller):
        backend.seed(LAB, {"category_name": "Physics"})
        controller = make_controller("lab_categories")
        await controller.list()
        backend.fail_next("GET", LAB, 500, {"message": "DB down"})

        assert not await controller.list(2)

        assert [r["category_name"] for r in controller.records] == ["Physics"]
        assert controller.pagination.current_page == 1
        assert controller.notification.text == "Failed to fetch lab categories"
        assert controller.loading is False

    @pytest.mark.asyncio
    async def test_malformed_list_reported(self, backend, make_controller):
        controller = make_controller("lab_categories")
        backend.fail_next("GET", LAB, 200, {"data": None})

        assert not await controller.list()

        assert controller.records == []
        assert controller.notification.text == "Failed to fetch lab categories"
        assert controller.loading is False

    @pytest.mark.asyncio
    async def test_unexpected_list_error_reported(self):
        resource = Mock()
        resource.client.settings.page_limit = 10
        resource.client.settings.max_upload_size = 1024
        resource.get_all = AsyncMock(side_effect=RuntimeError("boom"))
        controller = ResourceController(resource, LAB_CATEGORIES, NotificationCenter())

        assert not await controller.list()

        assert controller.notification.text == "Failed to fetch lab categories"
        assert controller.loading is False

    @pytest.mark.asyncio
    async def test_stale_response_discarded(self, backend, make_controller):
        """
        Ответ на "x", пришедший после ответа на "xy", отбрасывается.
        """
        backend.seed(LAB, {"category_name": "Xylophone room"}, {"category_name": "X-ray lab"})
        backend.search_delays["x"] = 0.3
        controller = make_controller("lab_categories")

        slow = asyncio.create_task(controller.search("x"))
        await asyncio.sleep(0.05)
        assert controller.loading is True

        assert await controller.search("xy")
        assert controller.loading is True

        assert await slow is False
        assert controller.loading is False
        assert controller.search_term == "xy"
        assert [r["category_name"] for r in controller.records] == ["Xylophone room"]


class TestEditor:
    @pytest.mark.asyncio
    async def test_begin_create_uses_defaults(self, make_controller, notifications):
        controller = make_controller("programs")
        notifications.error("old error")

        controller.begin_create()

        assert controller.editor_open is True
        assert controller.editing_id is None
        assert controller.draft["total_credits"] == 120
        assert controller.notification is None

    @pytest.mark.asyncio
    async def test_begin_edit_copies_record(self, make_controller):
        controller = make_controller("programs")

        controller.begin_edit({"id": 9, "acronym": "MBA", "course_types": ["Core", "Elective"], "title": None})

        assert controller.editing_id == 9
        assert controller.draft["acronym"] == "MBA"
        assert controller.draft["course_types"] == "Core, Elective"
        assert controller.draft["title"] == ""

    @pytest.mark.asyncio
    async def test_set_field_clears_field_error(self, make_controller):
        controller = make_controller("lab_categories")
        controller.begin_create()
        assert not controller.validate()
        assert controller.notification.text == "Category name is required"

        controller.set_field("category_name", "Optics")

        assert controller.validation_errors == {}
        assert controller.notification is None

    @pytest.mark.asyncio
    async def test_set_unknown_field(self, make_controller):
        controller = make_controller("lab_categories")

        with pytest.raises(KeyError):
            controller.set_field("colour", "red")

    @pytest.mark.asyncio
    async def test_validate_shows_first_error(self, make_controller, valid_program):
        controller = make_controller("programs")
        controller.begin_create()
        controller.draft.update(valid_program, acronym="", program_min_duration=5, program_max_duration=4)

        assert not controller.validate()

        assert list(controller.validation_errors) == ["acronym", "program_max_duration"]
        assert controller.notification.text == "Acronym is required"

    @pytest.mark.asyncio
    async def test_cancel_resets_form(self, make_controller):
        controller = make_controller("organisation")
        controller.begin_edit({"id": 1, "society_name": "Trust", "logo_url": "/uploads/logos/a.png"})

        controller.cancel()

        assert controller.editor_open is False
        assert controller.editing_id is None
        assert controller.draft == controller.schema.defaults()
        assert controller.asset.existing_url is None
        assert len(controller.asset_urls) == 0


class TestSubmit:
    @pytest.mark.asyncio
    async def test_invalid_draft_never_calls_network(self, backend, make_controller):
        controller = make_controller("lab_categories")
        controller.begin_create()
        controller.set_field("category_name", "A")
        before = len(backend.requests)

        assert not await controller.submit()

        assert len(backend.requests) == before
        assert controller.validation_errors == {
            "category_name": "Category name must be at least 2 characters long"
        }
        assert controller.editor_open is True
        assert controller.saving is False

    @pytest.mark.asyncio
    async def test_create_refreshes_list(self, backend, make_controller):
        controller = make_controller("lab_categories")
        await controller.list()
        controller.begin_create()
        controller.set_field("category_name", "  Robotics ")

        assert await controller.submit()

        assert [r["category_name"] for r in controller.records] == ["Robotics"]
        assert controller.editor_open is False
        assert controller.editing_id is None
        assert controller.draft == controller.schema.defaults()
        assert controller.notification.text == "Lab category created successfully!"
        assert controller.notification.is_success

    @pytest.mark.asyncio
    async def test_update_program(self, backend, make_controller, valid_program):
        (record,) = backend.seed("config/programs", dict(valid_program, acronym="OLD"))
        controller = make_controller("programs")
        await controller.list()

        controller.begin_edit(controller.records[0])
        controller.set_field("acronym", "MTECH")
        assert await controller.submit()

        stored = backend.collections["config/programs"][record["id"]]
        assert stored["acronym"] == "MTECH"
        assert stored["specializations"] == ["AI", "Data Science"]
        assert stored["program_type_id"] == 1
        assert controller.notification.text == "Program updated successfully!"

    @pytest.mark.asyncio
    async def test_server_validation_errors(self, backend, make_controller):
        backend.fail_next("POST", LAB, 400, {"errors": [{"msg": "Name taken"}, {"msg": "Too long"}]})
        controller = make_controller("lab_categories")
        controller.begin_create()
        controller.set_field("category_name", "Optics")

        assert not await controller.submit()

        assert controller.notification.text == "Validation errors: Name taken, Too long"
        assert controller.editor_open is True
        assert controller.draft["category_name"] == "Optics"

    @pytest.mark.asyncio
    async def test_server_message_and_fallback(self, backend, make_controller):
        controller = make_controller("lab_categories")
        controller.begin_create()
        controller.set_field("category_name", "Optics")

        backend.fail_next("POST", LAB, 409, {"message": "Category already exists"})
        await controller.submit()
        assert controller.notification.text == "Category already exists"

        backend.fail_next("POST", LAB, 500, {})
        await controller.submit()
        assert controller.notification.text == "Failed to save lab category"

    @pytest.mark.asyncio
    async def test_duplicate_user_email(self, backend, make_controller):
        backend.seed("config/users", {"first_name": "Asha", "last_name": "Rao", "email": "asha@college.edu"})
        controller = make_controller("users")
        await controller.list()
        controller.begin_create()
        for name, value in {
            "first_name": "Asha",
            "last_name": "K",
            "email": "ASHA@college.edu",
            "faculty_type_id": "1",
            "department_id": "1",
        }.items():
            controller.set_field(name, value)
        before = len(backend.requests)

        assert not await controller.submit()

        assert len(backend.requests) == before
        assert controller.validation_errors == {"email": "This email address is already in use"}


class TestRemove:
    @pytest.mark.asyncio
    async def test_remove_refreshes_list(self, backend, make_controller):
        first, second = backend.seed(LAB, {"category_name": "Physics"}, {"category_name": "Chemistry"})
        confirm = Mock(return_value=True)
        controller = make_controller("lab_categories", confirm=confirm)
        await controller.list()

        assert await controller.remove(first["id"])

        confirm.assert_called_once_with("Are you sure you want to delete this lab category?")
        assert [r["id"] for r in controller.records] == [second["id"]]
        assert controller.notification.text == "Lab category deleted successfully!"
        await controller.list()
        assert first["id"] not in [r["id"] for r in controller.records]

    @pytest.mark.asyncio
    async def test_declined_confirmation(self, backend, make_controller):
        (record,) = backend.seed(LAB, {"category_name": "Physics"})
        controller = make_controller("lab_categories", confirm=AsyncMock(return_value=False))
        before = len(backend.requests)

        assert not await controller.remove(record["id"])

        assert len(backend.requests) == before
        assert record["id"] in backend.collections[LAB]

    @pytest.mark.asyncio
    async def test_failed_delete(self, backend, make_controller):
        (record,) = backend.seed(LAB, {"category_name": "Physics"})
        controller = make_controller("lab_categories")
        await controller.list()
        backend.fail_next("DELETE", LAB, 409, {"message": "Category is used by labs"})

        assert not await controller.remove(record["id"])

        assert controller.notification.text == "Category is used by labs"
        assert [r["id"] for r in controller.records] == [record["id"]]


class TestAssets:
    @pytest.mark.asyncio
    async def test_begin_edit_resolves_logo(self, backend, make_controller, settings):
        controller = make_controller("organisation")

        controller.begin_edit({"id": 4, "society_name": "Trust", "logo_url": "/uploads/logos/crest.png"})

        expected = f"{settings.static_base_url}/uploads/logos/crest.png"
        assert controller.asset.existing_url == expected
        assert controller.asset_urls.get(4) == expected

        controller.begin_edit({"id": 4, "society_name": "Trust", "logo_url": None})
        assert controller.asset.existing_url is None
        assert 4 not in controller.asset_urls

    @pytest.mark.asyncio
    async def test_faculty_document_url(self, make_controller, settings):
        controller = make_controller("patent_innovation")

        controller.begin_edit({"id": 2, "title": "Solar cell", "upload_file": "cert.pdf"})

        assert controller.asset.existing_url == (
            f"{settings.api_url}/faculty/uploads/patent-innovation/cert.pdf"
        )

    @pytest.mark.asyncio
    async def test_delete_logo_on_edit(self, backend, make_controller):
        """
        Удаление логотипа: в multipart есть delete_logo=true и нет файла.
        """
        backend.seed(
            ORGANISATION,
            {
                "society_name": "Education Trust",
                "organisation_name": "City College",
                "mission": "Educate every student well",
                "vision": "A centre of excellence",
                "logo_url": "/uploads/logos/old.png",
            },
        )
        controller = make_controller("organisation")
        await controller.list()
        controller.begin_edit(controller.records[0])

        controller.delete_asset()
        assert await controller.submit()

        assert backend.last_form["delete_logo"] == "true"
        assert "logo" not in backend.last_form
        assert backend.last_form["society_name"] == "Education Trust"
        assert controller.records[0]["logo_url"] is None

    @pytest.mark.asyncio
    async def test_create_with_logo(self, backend, make_controller):
        controller = make_controller("organisation")
        controller.begin_create()
        for name, value in {
            "society_name": "Education Trust",
            "organisation_name": "City College",
            "mission": "Educate every student well",
            "vision": "A centre of excellence",
        }.items():
            controller.set_field(name, value)

        assert controller.select_file(png())
        assert await controller.submit()

        assert backend.last_form["logo"] == ("file", "crest.png")
        assert "delete_logo" not in backend.last_form
        assert backend.last_form["description"] == ""
        assert controller.records[0]["logo_url"] == "/uploads/logos/crest.png"

    @pytest.mark.asyncio
    async def test_rejected_file_reports_error(self, backend, make_controller):
        controller = make_controller("organisation")
        controller.begin_create()
        before = len(backend.requests)

        pdf = UploadFile(filename="brochure.pdf", content=b"%PDF", content_type="application/pdf")
        assert not controller.select_file(pdf)

        assert controller.notification.text == "Please select an image file"
        assert controller.asset.file is None
        assert len(backend.requests) == before

    @pytest.mark.asyncio
    async def test_academic_body_multipart_fields(self, backend, make_controller):
        controller = make_controller("academic_bodies")
        controller.begin_create()
        controller.set_field("memberOf", "Board of Studies")
        controller.set_field("institution", "State University")
        controller.select_file(UploadFile(filename="letter.pdf", content=b"%PDF", content_type="application/pdf"))

        assert await controller.submit()

        assert backend.last_form["uploadFile"] == ("file", "letter.pdf")
        assert backend.last_form["memberOf"] == "Board of Studies"
        assert controller.notification.text == "Academic body created successfully!"

    @pytest.mark.asyncio
    async def test_asset_operations_on_plain_resource(self, make_controller):
        controller = make_controller("lab_categories")

        with pytest.raises(TypeError):
            controller.select_file(png())


@pytest.mark.asyncio
async def test_controller_with_mocked_resource():
    """Контроллер работает с любым ресурсом, у которого есть CRUD-методы."""
    resource = Mock()
    resource.client.settings.page_limit = 5
    resource.client.settings.max_upload_size = 1024
    resource.get_all = AsyncMock(return_value=ListPage.model_validate([{"id": 1, "category_name": "Optics"}]))
    resource.create = AsyncMock(side_effect=CampusAdminAPIError(500, "boom", None))
    controller = ResourceController(resource, LAB_CATEGORIES, NotificationCenter())

    await controller.list()
    controller.begin_create()
    controller.set_field("category_name", "Acoustics")
    assert not await controller.submit()

    resource.get_all.assert_awaited_once_with(page=1, limit=5, search=None)
    assert controller.pagination.total_count == 1
    assert controller.notification.text == "Failed to save lab category"
    assert resource.create.await_args.args[0] == {"category_name": "Acoustics", "description": ""}

"""
Tests for the versioned REST resources: buildings, categories, departments
and API roles.

Runs each service against the in-process Jamf Pro stand-in and checks the
paths, JSON bodies and results.
"""

import json

import pytest
from aiohttp import web

from jamfpro.errors import ApiError, ArgError, ResourceNotFoundError
from jamfpro.resources import (
    ApiRoleRequest,
    BuildingRequest,
    CategoryRequest,
    DepartmentRequest,
)


def _body(call):
    return json.loads(call["body"])


class TestBuildings:
    @pytest.fixture(autouse=True)
    def routes(self, fake_jamf):
        fake_jamf.on(
            "GET",
            "/uapi/v1/buildings",
            web.json_response(
                {
                    "totalCount": 2,
                    "results": [
                        {"id": "1", "name": "HQ", "streetAddress1": "1 Infinite Loop"},
                        {"id": "2", "name": "Annex"},
                    ],
                }
            ),
        )
        fake_jamf.on(
            "GET",
            "/uapi/v1/buildings/2",
            web.json_response({"id": "2", "name": "Annex", "city": "Cupertino"}),
        )

    async def test_list(self, client):
        buildings = await client.buildings.list()
        assert [b.name for b in buildings] == ["HQ", "Annex"]
        assert buildings[0].street_address1 == "1 Infinite Loop"

    async def test_get_by_id(self, client):
        building = await client.buildings.get_by_id(2)
        assert building.city == "Cupertino"

    async def test_get_by_name_lists_then_fetches(self, fake_jamf, client):
        building = await client.buildings.get_by_name("Annex")

        assert building.id == "2"
        assert len(fake_jamf.calls("GET", "/uapi/v1/buildings")) == 1
        assert len(fake_jamf.calls("GET", "/uapi/v1/buildings/2")) == 1

    async def test_get_by_name_without_match(self, client):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await client.buildings.get_by_name("Warehouse")
        assert exc_info.value.name == "Warehouse"

    async def test_get_by_name_keeps_non_numeric_id(self, fake_jamf, client):
        fake_jamf.on(
            "GET",
            "/uapi/v1/buildings",
            web.json_response({"totalCount": 1, "results": [{"id": "abc", "name": "Depot"}]}),
        )
        fake_jamf.on("GET", "/uapi/v1/buildings/abc", web.json_response({"id": "abc", "name": "Depot"}))

        building = await client.buildings.get_by_name("Depot")

        assert building.id == "abc"
        assert len(fake_jamf.calls("GET", "/uapi/v1/buildings/abc")) == 1

    @pytest.mark.parametrize("building_id", [0, None, ""])
    async def test_zero_id_rejected_without_network(self, fake_jamf, client, building_id):
        with pytest.raises(ArgError, match="building ID is invalid because cannot be 0"):
            await client.buildings.get_by_id(building_id)
        assert fake_jamf.requests == []

    async def test_create(self, fake_jamf, client):
        fake_jamf.on(
            "POST",
            "/uapi/v1/buildings",
            web.json_response({"id": "7", "href": "/uapi/v1/buildings/7"}, status=201),
        )

        building = await client.buildings.create(
            BuildingRequest(name="Lab", street_address1="2 Park Ave", city="Austin")
        )

        assert building.id == "7"
        assert building.href == "/uapi/v1/buildings/7"
        assert building.city == "Austin"
        sent = _body(fake_jamf.calls("POST", "/uapi/v1/buildings")[0])
        assert sent == {"name": "Lab", "streetAddress1": "2 Park Ave", "city": "Austin"}

    async def test_create_requires_request(self, client):
        with pytest.raises(ArgError, match="createRequest"):
            await client.buildings.create(None)

    async def test_update(self, fake_jamf, client):
        fake_jamf.on(
            "PUT",
            "/uapi/v1/buildings/2",
            web.json_response({"id": "2", "name": "Annex West", "country": "US"}),
        )

        building = await client.buildings.update(2, BuildingRequest(name="Annex West", country="US"))

        assert building.name == "Annex West"
        assert _body(fake_jamf.calls("PUT", "/uapi/v1/buildings/2")[0]) == {
            "name": "Annex West",
            "country": "US",
        }

    async def test_delete(self, fake_jamf, client):
        fake_jamf.on("DELETE", "/uapi/v1/buildings/2", web.Response(status=204))

        response = await client.buildings.delete(2)

        assert response.status == 204
        assert len(fake_jamf.calls("DELETE", "/uapi/v1/buildings/2")) == 1

    async def test_delete_missing_raises_api_error(self, client):
        with pytest.raises(ApiError) as exc_info:
            await client.buildings.delete(99)
        assert exc_info.value.status == 404


class TestCategories:
    async def test_create_combines_request_and_id(self, fake_jamf, client):
        fake_jamf.on(
            "POST",
            "/uapi/v1/categories",
            web.json_response({"id": "3", "href": "/uapi/v1/categories/3"}, status=201),
        )

        category = await client.categories.create(CategoryRequest(name="Apps", priority=5))

        assert (category.id, category.name, category.priority) == ("3", "Apps", 5)
        assert _body(fake_jamf.calls("POST", "/uapi/v1/categories")[0]) == {
            "name": "Apps",
            "priority": 5,
        }

    async def test_update(self, fake_jamf, client):
        fake_jamf.on(
            "PUT",
            "/uapi/v1/categories/3",
            web.json_response({"id": "3", "name": "Productivity", "priority": 2}),
        )

        category = await client.categories.update(3, CategoryRequest(name="Productivity", priority=2))

        assert category.id == "3"
        assert category.name == "Productivity"

    async def test_get_by_name(self, fake_jamf, client):
        fake_jamf.on(
            "GET",
            "/uapi/v1/categories",
            web.json_response({"totalCount": 1, "results": [{"id": "3", "name": "Apps", "priority": 5}]}),
        )
        fake_jamf.on(
            "GET", "/uapi/v1/categories/3", web.json_response({"id": "3", "name": "Apps", "priority": 5})
        )

        category = await client.categories.get_by_name("Apps")

        assert category.priority == 5

    async def test_update_requires_id(self, client):
        with pytest.raises(ArgError, match="category ID"):
            await client.categories.update(0, CategoryRequest(name="x"))


class TestDepartments:
    async def test_crud(self, fake_jamf, client):
        fake_jamf.on(
            "POST", "/uapi/v1/departments", web.json_response({"id": "11", "href": "h"}, status=201)
        )
        fake_jamf.on("PUT", "/uapi/v1/departments/11", web.json_response({"id": "11", "name": "IT"}))
        fake_jamf.on("DELETE", "/uapi/v1/departments/11", web.Response(status=204))

        created = await client.departments.create(DepartmentRequest(name="Ops"))
        updated = await client.departments.update(int(created.id), DepartmentRequest(name="IT"))
        response = await client.departments.delete(11)

        assert created.id == "11"
        assert updated.name == "IT"
        assert response.status == 204

    async def test_list(self, fake_jamf, client):
        fake_jamf.on(
            "GET",
            "/uapi/v1/departments",
            web.json_response({"totalCount": 1, "results": [{"id": "11", "name": "IT"}]}),
        )
        departments = await client.departments.list()
        assert departments[0].name == "IT"


class TestApiRoles:
    async def test_get_by_display_name(self, fake_jamf, client):
        fake_jamf.on(
            "GET",
            "/uapi/v1/api-roles",
            web.json_response(
                {
                    "totalCount": 2,
                    "results": [
                        {"id": "1", "displayName": "Readers", "privileges": ["Read Computers"]},
                        {"id": "2", "displayName": "Writers", "privileges": []},
                    ],
                }
            ),
        )
        fake_jamf.on(
            "GET",
            "/uapi/v1/api-roles/2",
            web.json_response({"id": "2", "displayName": "Writers", "privileges": ["Update Computers"]}),
        )

        role = await client.api_roles.get_by_name("Writers")

        assert role.id == "2"
        assert role.privileges == ["Update Computers"]

    async def test_create_sends_display_name(self, fake_jamf, client):
        fake_jamf.on(
            "POST",
            "/uapi/v1/api-roles",
            web.json_response(
                {"id": "4", "displayName": "Auditors", "privileges": ["Read Buildings"]}, status=201
            ),
        )

        role = await client.api_roles.create(
            ApiRoleRequest(display_name="Auditors", privileges=["Read Buildings"])
        )

        assert role.id == "4"
        assert _body(fake_jamf.calls("POST", "/uapi/v1/api-roles")[0]) == {
            "displayName": "Auditors",
            "privileges": ["Read Buildings"],
        }

    async def test_update_and_delete(self, fake_jamf, client):
        fake_jamf.on(
            "PUT",
            "/uapi/v1/api-roles/4",
            web.json_response({"id": "4", "displayName": "Auditors", "privileges": []}),
        )
        fake_jamf.on("DELETE", "/uapi/v1/api-roles/4", web.Response(status=204))

        role = await client.api_roles.update(4, ApiRoleRequest(display_name="Auditors"))
        response = await client.api_roles.delete(4)

        assert role.privileges == []
        assert response.status == 204

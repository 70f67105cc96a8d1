"""Departments on the versioned REST root."""

import logging

from jamfpro.resources.base import ApiModel, CreatedResponse, RestResourceService

logger = logging.getLogger(__name__)


class Department(ApiModel):
    id: str | None = None
    name: str
    href: str | None = None


class DepartmentRequest(ApiModel):
    name: str


class DepartmentUpdateResponse(ApiModel):
    id: str
    name: str | None = None


class DepartmentsService(RestResourceService[Department]):
    resource = "department"
    base_path = "uapi/v1/departments"
    model = Department

    async def create(self, request: DepartmentRequest) -> Department:
        self._require(request, "createRequest")
        with self._context("create"):
            response = await self._send("POST", self.base_path, body=request, into=CreatedResponse)
            created = response.data
            logger.info("Created department", extra={"resource_id": created.id})
            return Department(id=created.id, href=created.href, name=request.name)

    async def update(self, department_id: int, request: DepartmentRequest) -> Department:
        self._require(request, "updateRequest")
        self._require_id(department_id, "department ID")
        with self._context("update", department_id):
            response = await self._send(
                "PUT", self._path(department_id), body=request, into=DepartmentUpdateResponse
            )
            return Department(id=response.data.id, name=request.name)


__all__ = ["Department", "DepartmentRequest", "DepartmentsService"]

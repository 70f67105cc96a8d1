"""API roles (privilege bundles for API clients) on the versioned REST root."""

from pydantic import Field

from jamfpro.resources.base import ApiModel, RestResourceService


class ApiRole(ApiModel):
    id: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    privileges: list[str] = Field(default_factory=list)


class ApiRoleRequest(ApiModel):
    display_name: str = Field(alias="displayName")
    privileges: list[str] = Field(default_factory=list)


class ApiRolesService(RestResourceService[ApiRole]):
    """Roles are looked up by ``displayName``; create and update echo the stored role."""

    resource = "api role"
    base_path = "uapi/v1/api-roles"
    model = ApiRole
    name_field = "display_name"

    async def create(self, request: ApiRoleRequest) -> ApiRole:
        self._require(request, "createRequest")
        with self._context("create"):
            response = await self._send("POST", self.base_path, body=request, into=ApiRole)
            return response.data

    async def update(self, role_id: int, request: ApiRoleRequest) -> ApiRole:
        self._require(request, "updateRequest")
        self._require_id(role_id, "api role ID")
        with self._context("update", role_id):
            response = await self._send("PUT", self._path(role_id), body=request, into=ApiRole)
            return response.data


__all__ = ["ApiRole", "ApiRoleRequest", "ApiRolesService"]

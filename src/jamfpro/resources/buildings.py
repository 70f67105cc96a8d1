"""Buildings on the versioned REST root."""

import logging

from pydantic import Field

from jamfpro.resources.base import ApiModel, CreatedResponse, RestResourceService

logger = logging.getLogger(__name__)


class Building(ApiModel):
    id: str | None = None
    name: str | None = None
    street_address1: str | None = Field(default=None, alias="streetAddress1")
    street_address2: str | None = Field(default=None, alias="streetAddress2")
    city: str | None = None
    state_province: str | None = Field(default=None, alias="stateProvince")
    zip_postal_code: str | None = Field(default=None, alias="zipPostalCode")
    country: str | None = None
    href: str | None = None


class BuildingRequest(ApiModel):
    """Body of a building create or update. Unset address fields are left out."""

    name: str
    street_address1: str | None = Field(default=None, alias="streetAddress1")
    street_address2: str | None = Field(default=None, alias="streetAddress2")
    city: str | None = None
    state_province: str | None = Field(default=None, alias="stateProvince")
    zip_postal_code: str | None = Field(default=None, alias="zipPostalCode")
    country: str | None = None


class BuildingsService(RestResourceService[Building]):
    resource = "building"
    base_path = "uapi/v1/buildings"
    model = Building

    def _from_request(self, request: BuildingRequest, **fields) -> Building:
        return Building(**request.model_dump(), **fields)

    async def create(self, request: BuildingRequest) -> Building:
        self._require(request, "createRequest")
        with self._context("create"):
            response = await self._send("POST", self.base_path, body=request, into=CreatedResponse)
            created = response.data
            logger.info("Created building", extra={"resource_id": created.id})
            return self._from_request(request, id=created.id, href=created.href)

    async def update(self, building_id: int, request: BuildingRequest) -> Building:
        self._require(request, "updateRequest")
        self._require_id(building_id, "building ID")
        with self._context("update", building_id):
            response = await self._send("PUT", self._path(building_id), body=request, into=Building)
            return response.data


__all__ = ["Building", "BuildingRequest", "BuildingsService"]

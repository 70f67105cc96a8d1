"""Static and smart computer groups on the legacy JSSResource root (XML)."""

import logging
from typing import ClassVar

from pydantic import Field

from jamfpro.errors.exceptions import ArgError
from jamfpro.resilience.reconcile import reconcile_after_mutation
from jamfpro.resources.base import ApiModel, ResourceService, find_id
from jamfpro.resources.computers import Computer
from jamfpro.resources.equivalence import are_groups_equivalent
from jamfpro.transport.dispatcher import Response
from jamfpro.types import ContentType

logger = logging.getLogger(__name__)


class ComputerGroupCriterion(ApiModel):
    name: str = ""
    priority: int = 0
    and_or: str = "and"
    search_type: str = ""
    value: str = ""
    opening_paren: bool = False
    closing_paren: bool = False


class ComputerGroup(ApiModel):
    """
    A computer group.

    Smart groups are defined by ``criteria`` and static groups by
    ``computers``; reads clear whichever list does not apply.
    """

    xml_tag: ClassVar[str] = "computer_group"

    id: int = 0
    name: str = ""
    is_smart: bool = False
    criteria: list[ComputerGroupCriterion] = Field(
        default_factory=list, json_schema_extra={"xml_item": "criterion"}
    )
    computers: list[Computer] = Field(
        default_factory=list, json_schema_extra={"xml_item": "computer"}
    )

    def normalized(self) -> "ComputerGroup":
        if self.is_smart:
            return self.model_copy(update={"computers": []})
        return self.model_copy(update={"criteria": []})


class ComputerGroupRequest(ApiModel):
    xml_tag: ClassVar[str] = "computer_group"

    name: str
    is_smart: bool = False
    criteria: list[ComputerGroupCriterion] = Field(
        default_factory=list, json_schema_extra={"xml_item": "criterion"}
    )
    computers: list[Computer] = Field(
        default_factory=list, json_schema_extra={"xml_item": "computer"}
    )


class ComputerGroupIdResponse(ApiModel):
    xml_tag: ClassVar[str] = "computer_group"

    id: int = 0


class ComputerGroupList(ApiModel):
    computer_groups: list[ComputerGroup] = Field(default_factory=list)


class ComputerGroupsService(ResourceService):
    resource = "computer group"
    base_path = "JSSResource/computergroups"
    content_type = ContentType.XML

    async def list(self):
        response = await self._send(
            "GET", self.base_path, into=ComputerGroupList, content_type=ContentType.JSON
        )
        return response.data.computer_groups

    async def fetch_by_id(self, group_id: int) -> Response:
        """Read a group; the response's ``data`` is the normalized group."""
        response = await self._send("GET", self._path("id", group_id), into=ComputerGroup)
        response.data = response.data.normalized()
        return response

    async def get_by_id(self, group_id: int) -> ComputerGroup:
        self._require_id(group_id, "computer group ID")
        return (await self.fetch_by_id(group_id)).data

    async def get_by_name(self, name: str) -> ComputerGroup:
        groups = await self.list()
        group_id = find_id(groups, name, key=lambda g: g.name, resource=self.resource)
        return await self.get_by_id(group_id)

    @staticmethod
    def _validate(request: ComputerGroupRequest) -> None:
        if request.is_smart and not request.criteria:
            raise ArgError("criteria", "criteria must be supplied for a smart group")

    async def _mutate(
        self, method: str, path: str, request: ComputerGroupRequest
    ) -> ComputerGroup:
        response = await self._send(method, path, body=request, into=ComputerGroupIdResponse)
        group_id = self._created_id(response, "create" if method == "POST" else "update")
        intended = ComputerGroup(
            id=group_id,
            name=request.name,
            is_smart=request.is_smart,
            criteria=request.criteria,
            computers=request.computers,
        ).normalized()
        await reconcile_after_mutation(
            group_id,
            intended,
            self.fetch_by_id,
            are_groups_equivalent,
            config=self._client.reconcile_config,
            resource=self.resource,
        )
        return intended

    async def create(self, request: ComputerGroupRequest) -> ComputerGroup:
        self._require(request, "createRequest")
        self._validate(request)
        with self._context("create"):
            group = await self._mutate("POST", self._path("id", 0), request)
            logger.info("Created computer group", extra={"resource_id": group.id})
            return group

    async def update(self, group_id: int, request: ComputerGroupRequest) -> ComputerGroup:
        self._require(request, "updateRequest")
        self._require_id(group_id, "computer group ID")
        self._validate(request)
        with self._context("update", group_id):
            return await self._mutate("PUT", self._path("id", group_id), request)

    async def delete(self, group_id: int) -> Response:
        self._require_id(group_id, "computer group ID")
        with self._context("delete", group_id):
            return await self._send("DELETE", self._path("id", group_id))


__all__ = [
    "ComputerGroup",
    "ComputerGroupCriterion",
    "ComputerGroupRequest",
    "ComputerGroupsService",
]

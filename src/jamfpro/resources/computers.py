"""
Computer records on the legacy JSSResource root.

Reads use JSON; creates and updates send XML. Creates, updates and deletes
are reconciled against the read path before they return.
"""

import logging
from typing import ClassVar

from pydantic import Field

from jamfpro.resilience.reconcile import reconcile_after_delete, reconcile_after_mutation
from jamfpro.resources.base import ApiModel, ResourceService, find_id
from jamfpro.resources.equivalence import are_computer_records_equivalent
from jamfpro.transport.dispatcher import Response
from jamfpro.types import ContentType

logger = logging.getLogger(__name__)


class ComputerGeneral(ApiModel):
    id: int = 0
    name: str = ""
    asset_tag: str | None = None
    platform: str | None = None
    serial_number: str = ""
    udid: str | None = None


class Computer(ApiModel):
    """
    A computer record.

    The JSON read path nests identity fields under ``general``; they are
    copied to the top level so every read returns the same shape. ``general``
    is never sent in XML.
    """

    xml_tag: ClassVar[str] = "computer"

    id: int = 0
    name: str = ""
    general: ComputerGeneral | None = Field(default=None, exclude=True)
    serial_number: str | None = None
    udid: str | None = None

    def flattened(self) -> "Computer":
        if self.general is None:
            return self
        return self.model_copy(
            update={
                "id": self.general.id,
                "name": self.general.name,
                "serial_number": self.general.serial_number,
                "udid": self.general.udid,
            }
        )


class ComputerEnvelope(ApiModel):
    computer: Computer


class ComputerList(ApiModel):
    computers: list[Computer] = Field(default_factory=list)


class ComputerGeneralRequest(ApiModel):
    name: str
    serial_number: str
    udid: str | None = None


class ComputerRequest(ApiModel):
    """``<computer><general>...</general></computer>`` create/update body."""

    xml_tag: ClassVar[str] = "computer"

    general: ComputerGeneralRequest


class ComputerIdResponse(ApiModel):
    xml_tag: ClassVar[str] = "computer"

    id: int = 0


class ComputersService(ResourceService):
    resource = "computer"
    base_path = "JSSResource/computers"
    content_type = ContentType.XML

    async def list(self):
        response = await self._send(
            "GET", self.base_path, into=ComputerList, content_type=ContentType.JSON
        )
        return response.data.computers

    async def _fetch(self, path: str) -> Response:
        response = await self._send("GET", path, into=ComputerEnvelope, content_type=ContentType.JSON)
        response.data = response.data.computer.flattened()
        return response

    async def fetch_by_id(self, computer_id: int) -> Response:
        """Read a computer; the response's ``data`` is the flattened record."""
        return await self._fetch(self._path("id", computer_id))

    async def get_by_id(self, computer_id: int) -> Computer:
        self._require_id(computer_id, "computer ID")
        return (await self.fetch_by_id(computer_id)).data

    async def get_by_serial_number(self, serial_number: str) -> Computer:
        self._require_id(serial_number, "serial number")
        return (await self._fetch(self._path("serialnumber", serial_number))).data

    async def get_by_name(self, name: str) -> Computer:
        computers = await self.list()
        computer_id = find_id(computers, name, key=lambda c: c.name, resource=self.resource)
        return await self.get_by_id(computer_id)

    async def _mutate(self, method: str, path: str, request: ComputerRequest) -> Computer:
        response = await self._send(method, path, body=request, into=ComputerIdResponse)
        computer_id = self._created_id(response, "create" if method == "POST" else "update")
        intended = Computer(
            id=computer_id,
            name=request.general.name,
            serial_number=request.general.serial_number,
        )
        observed, _ = await reconcile_after_mutation(
            computer_id,
            intended,
            self.fetch_by_id,
            are_computer_records_equivalent,
            config=self._client.reconcile_config,
            resource=self.resource,
        )
        return observed

    async def create(self, request: ComputerRequest) -> Computer:
        self._require(request, "createRequest")
        with self._context("create"):
            computer = await self._mutate("POST", self._path("id", 0), request)
            logger.info("Created computer", extra={"resource_id": computer.id})
            return computer

    async def update(self, computer_id: int, request: ComputerRequest) -> Computer:
        self._require(request, "updateRequest")
        self._require_id(computer_id, "computer ID")
        with self._context("update", computer_id):
            return await self._mutate("PUT", self._path("id", computer_id), request)

    async def delete(self, computer_id: int) -> Response:
        """Delete a computer and wait until reads report it gone."""
        self._require_id(computer_id, "computer ID")
        with self._context("delete", computer_id):
            response = await self._send("DELETE", self._path("id", computer_id))
            await reconcile_after_delete(
                computer_id,
                self.fetch_by_id,
                config=self._client.reconcile_config,
                resource=self.resource,
            )
            logger.info("Deleted computer", extra={"resource_id": computer_id})
            return response


__all__ = [
    "Computer",
    "ComputerGeneral",
    "ComputerRequest",
    "ComputerGeneralRequest",
    "ComputersService",
]

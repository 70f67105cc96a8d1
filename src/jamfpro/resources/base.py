"""Shared plumbing for resource services."""

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from jamfpro.errors.exceptions import ArgError, MissingIdError, ResourceNotFoundError
from jamfpro.logging.context_managers import LogContext
from jamfpro.transport.dispatcher import Response
from jamfpro.types import ContentType

if TYPE_CHECKING:
    from jamfpro.client import JamfProClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for API models: camelCase aliases on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True)


class Page(ApiModel, Generic[T]):
    """List envelope of the versioned REST root."""

    total_count: int | None = Field(default=None, alias="totalCount")
    results: list[T] = Field(default_factory=list)


class CreatedResponse(ApiModel):
    """Body returned by POST on the versioned REST root."""

    id: str
    href: str | None = None


def path_segment(value: Any) -> str:
    return quote(str(value), safe="")


def find_id(items: Iterable[Any], name: str, key: Callable[[Any], Any], resource: str) -> Any:
    """Return the id of the first item whose ``key`` equals ``name``."""
    for item in items:
        if key(item) == name:
            return item.id
    raise ResourceNotFoundError(resource, name)


class ResourceService:
    """
    Base for one resource family.

    Subclasses set ``resource`` (used in logs and errors), ``base_path`` and
    ``content_type``, then express each operation as a path plus a payload
    model handed to ``JamfProClient.send``.
    """

    resource: ClassVar[str] = "resource"
    base_path: ClassVar[str] = ""
    content_type: ClassVar[ContentType] = ContentType.JSON

    def __init__(self, client: "JamfProClient"):
        self._client = client

    def _path(self, *parts: Any) -> str:
        return "/".join([self.base_path, *(path_segment(part) for part in parts)])

    def _context(self, operation: str, resource_id: Any = None) -> LogContext:
        return LogContext(resource=self.resource, operation=operation, resource_id=resource_id)

    async def _send(
        self,
        method: str,
        path: str,
        body: Any = None,
        into: Any = None,
        content_type: ContentType | None = None,
    ) -> Response:
        return await self._client.send(
            method,
            path,
            body=body,
            content_type=content_type or self.content_type,
            into=into,
        )

    @staticmethod
    def _require(value: Any, arg: str) -> None:
        if value is None:
            raise ArgError(arg, "cannot be None")

    @staticmethod
    def _require_id(value: Any, arg: str) -> None:
        if value is None or value == 0 or value == "":
            raise ArgError(arg, "cannot be 0")

    def _created_id(self, response: Response, operation: str) -> Any:
        """The id a create/update answered with; 0 or missing means the write did not land."""
        resource_id = getattr(response.data, "id", None)
        if not resource_id:
            logger.error(
                "Write returned no id",
                extra={"resource": self.resource, "http_status": response.status},
            )
            raise MissingIdError(self.resource, operation, response=response)
        return resource_id


M = TypeVar("M", bound=BaseModel)


class RestResourceService(ResourceService, Generic[M]):
    """
    CRUD on the versioned REST root (``uapi/v1/...``, JSON bodies).

    Identifiers are opaque strings on the wire; ``get_by_name`` lists,
    matches on ``name_field`` and fetches the match by id.
    """

    model: ClassVar[type[BaseModel]]
    name_field: ClassVar[str] = "name"

    async def list(self) -> list[M]:
        response = await self._send("GET", self.base_path, into=Page[self.model])
        return response.data.results

    async def get_by_id(self, resource_id: int | str) -> M:
        self._require_id(resource_id, f"{self.resource} ID")
        response = await self._send("GET", self._path(resource_id), into=self.model)
        return response.data

    async def get_by_name(self, name: str) -> M:
        items = await self.list()
        resource_id = find_id(
            items, name, key=lambda item: getattr(item, self.name_field), resource=self.resource
        )
        return await self.get_by_id(resource_id)

    async def delete(self, resource_id: int | str) -> Response:
        self._require_id(resource_id, f"{self.resource} ID")
        with self._context("delete", resource_id):
            response = await self._send("DELETE", self._path(resource_id))
            logger.info("Deleted resource", extra={"resource_id": resource_id})
            return response


__all__ = [
    "ApiModel",
    "Page",
    "CreatedResponse",
    "ResourceService",
    "RestResourceService",
    "find_id",
    "path_segment",
]

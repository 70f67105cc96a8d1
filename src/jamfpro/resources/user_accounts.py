"""Jamf Pro user accounts on the legacy JSSResource root (XML)."""

import logging
from typing import ClassVar

from pydantic import Field

from jamfpro.resources.base import ApiModel, ResourceService
from jamfpro.transport.dispatcher import Response
from jamfpro.types import ContentType

logger = logging.getLogger(__name__)


def _privilege_list():
    return Field(default_factory=list, json_schema_extra={"xml_item": "privilege"})


class Privileges(ApiModel):
    jss_objects: list[str] = _privilege_list()
    jss_settings: list[str] = _privilege_list()
    jss_actions: list[str] = _privilege_list()
    casper_admin: list[str] = _privilege_list()


class UserAccount(ApiModel):
    xml_tag: ClassVar[str] = "account"

    id: int = 0
    name: str = ""
    is_directory_user: bool = Field(default=False, alias="directory_user")
    full_name: str | None = None
    email: str | None = None
    email_address: str | None = None
    password_sha256: str | None = None
    enabled: str | None = None
    force_password_change: bool = False
    access_level: str | None = None
    privilege_set: str | None = None
    privileges: Privileges = Field(default_factory=Privileges)


class UserAccountRequest(ApiModel):
    xml_tag: ClassVar[str] = "account"

    name: str
    is_directory_user: bool = Field(default=False, alias="directory_user")
    full_name: str | None = None
    email: str | None = None
    email_address: str | None = None
    password: str | None = Field(default=None, repr=False)
    enabled: str | None = None
    force_password_change: bool = False
    access_level: str | None = None
    privilege_set: str | None = None
    privileges: Privileges | None = None


class UserAccountIdResponse(ApiModel):
    xml_tag: ClassVar[str] = "account"

    id: int


class AccountList(ApiModel):
    """``<accounts><users><user>...</user></users></accounts>``"""

    xml_tag: ClassVar[str] = "accounts"

    users: list[UserAccount] = Field(default_factory=list, json_schema_extra={"xml_item": "user"})


class UserAccountsService(ResourceService):
    resource = "user account"
    base_path = "JSSResource/accounts"
    content_type = ContentType.XML

    async def list(self):
        response = await self._send("GET", self.base_path, into=AccountList)
        return response.data.users

    async def get_by_id(self, account_id: int) -> UserAccount:
        self._require_id(account_id, "user account ID")
        response = await self._send("GET", self._path("userid", account_id), into=UserAccount)
        return response.data

    async def get_by_name(self, name: str) -> UserAccount:
        self._require_id(name, "user account name")
        response = await self._send("GET", self._path("username", name), into=UserAccount)
        return response.data

    def _from_request(self, account_id: int, request: UserAccountRequest) -> UserAccount:
        fields = request.model_dump(exclude={"password"}, exclude_none=True)
        return UserAccount(id=account_id, **fields)

    async def create(self, request: UserAccountRequest) -> UserAccount:
        self._require(request, "createRequest")
        with self._context("create"):
            response = await self._send(
                "POST", self._path("userid", 0), body=request, into=UserAccountIdResponse
            )
            logger.info("Created user account", extra={"resource_id": response.data.id})
            return self._from_request(response.data.id, request)

    async def update(self, account_id: int, request: UserAccountRequest) -> UserAccount:
        self._require(request, "updateRequest")
        self._require_id(account_id, "user account ID")
        with self._context("update", account_id):
            response = await self._send(
                "PUT", self._path("userid", account_id), body=request, into=UserAccountIdResponse
            )
            return self._from_request(response.data.id, request)

    async def delete(self, account_id: int) -> Response:
        self._require_id(account_id, "user account ID")
        with self._context("delete", account_id):
            return await self._send("DELETE", self._path("userid", account_id))


__all__ = [
    "UserAccount",
    "UserAccountRequest",
    "Privileges",
    "UserAccountsService",
]

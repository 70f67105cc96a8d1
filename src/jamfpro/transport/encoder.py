"""Turns a logical request into a transport-ready one."""

import logging
from dataclasses import dataclass, field
from typing import Any

from jamfpro.transport.codecs import encode_body
from jamfpro.types import SAFE_METHODS, ContentType

logger = logging.getLogger(__name__)


@dataclass
class RequestDescriptor:
    """
    A request as a resource service describes it.

    Attributes:
        method: HTTP method
        path: Path relative to the server base URL
        body: Payload to encode, or None for no body
        content_type: Declared encoding; unrecognized values mean JSON
    """

    method: str
    path: str
    body: Any = None
    content_type: ContentType | str = ContentType.JSON


@dataclass
class PreparedRequest:
    """A fully encoded request, ready for the dispatcher."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None
    content_type: ContentType = ContentType.JSON


class RequestEncoder:
    """
    Builds PreparedRequests against one server.

    Safe methods (GET/HEAD/OPTIONS) never carry a body. Other methods carry
    one whenever the descriptor has a body, encoded per its content type.
    """

    def __init__(self, base_url: str, extra_headers: dict[str, str] | None = None):
        self.base_url = base_url.rstrip("/") if base_url else ""
        if not self.base_url:
            raise ValueError("RequestEncoder requires 'base_url'")
        self.extra_headers = dict(extra_headers or {})

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def build(
        self,
        descriptor: RequestDescriptor,
        bearer_token: str | None = None,
        affinity: tuple[str, str] | None = None,
    ) -> PreparedRequest:
        """
        Encode a descriptor.

        Args:
            descriptor: The logical request
            bearer_token: Attached as ``Authorization: Bearer``, when given
            affinity: ``(cookie_name, value)`` pinning the request to one node

        Returns:
            PreparedRequest

        Raises:
            EncodingError: If the body cannot be encoded; nothing is built
        """
        method = descriptor.method.upper()
        content_type = ContentType.resolve(descriptor.content_type)

        body = None
        if method not in SAFE_METHODS and descriptor.body is not None:
            body = encode_body(descriptor.body, content_type)

        headers = dict(self.extra_headers)
        if body is not None:
            headers["Content-Type"] = content_type.value
        if content_type is not ContentType.XML:
            headers["Accept"] = ContentType.JSON.value
        if bearer_token:
            headers["Authorization"] = f"Bearer {bearer_token}"
        if affinity:
            name, value = affinity
            headers["Cookie"] = f"{name}={value}"

        request = PreparedRequest(
            method=method,
            url=self.url_for(descriptor.path),
            headers=headers,
            body=body,
            content_type=content_type,
        )
        logger.debug(
            "Built request",
            extra={
                "api_method": method,
                "api_url": request.url,
                "content_type": content_type.value,
            },
        )
        return request


__all__ = ["RequestDescriptor", "PreparedRequest", "RequestEncoder"]

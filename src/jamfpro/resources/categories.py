"""Categories on the versioned REST root."""

import logging

from jamfpro.resources.base import ApiModel, CreatedResponse, RestResourceService

logger = logging.getLogger(__name__)


class Category(ApiModel):
    id: str | None = None
    name: str
    priority: int = 0
    href: str | None = None


class CategoryRequest(ApiModel):
    name: str
    priority: int = 0


class CategoryUpdateResponse(ApiModel):
    id: str
    name: str | None = None
    priority: int | None = None


class CategoriesService(RestResourceService[Category]):
    resource = "category"
    base_path = "uapi/v1/categories"
    model = Category

    async def create(self, request: CategoryRequest) -> Category:
        """Create a category; the result combines the request with the new id and href."""
        self._require(request, "createRequest")
        with self._context("create"):
            response = await self._send("POST", self.base_path, body=request, into=CreatedResponse)
            created = response.data
            logger.info("Created category", extra={"resource_id": created.id})
            return Category(
                id=created.id,
                href=created.href,
                name=request.name,
                priority=request.priority,
            )

    async def update(self, category_id: int, request: CategoryRequest) -> Category:
        self._require(request, "updateRequest")
        self._require_id(category_id, "category ID")
        with self._context("update", category_id):
            response = await self._send(
                "PUT", self._path(category_id), body=request, into=CategoryUpdateResponse
            )
            return Category(id=response.data.id, name=request.name, priority=request.priority)


__all__ = ["Category", "CategoryRequest", "CategoriesService"]

"""Response envelope models.

Every success response uses {"data": ...}; collections add pagination
metadata under "meta"; errors use {"error": {...}}.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, computed_field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata for collections.

    Attributes:
        total: Total number of items across all pages.
        page: Current page number (1-indexed).
        per_page: Number of items per page.
    """

    total: int
    page: int
    per_page: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        """Calculate total number of pages.

        Returns:
            Number of pages needed to display all items.
            Returns 0 if total is 0.
        """
        if self.total == 0:
            return 0
        return (self.total + self.per_page - 1) // self.per_page


class DataResponse(BaseModel, Generic[T]):
    """Standard response envelope for single resources.

    Usage:
        @router.get("/profiles/me")
        async def get_my_profile(...) -> DataResponse[dict]:
            return DataResponse(data=_profile_to_dict(profile))
    """

    data: T


class ListResponse(BaseModel, Generic[T]):
    """Standard response envelope for collections.

    Usage:
        @router.get("/matches/{match_id}/messages")
        async def list_messages(
            pagination: PaginationParams = Depends(pagination_params)
        ) -> ListResponse[dict]:
            messages, total = await ChatRepository.list_for_match(...)
            return ListResponse(
                data=messages,
                meta=PaginationMeta(
                    total=total,
                    page=pagination.page,
                    per_page=pagination.per_page,
                ),
            )
    """

    data: list[T]
    meta: PaginationMeta


class ErrorDetail(BaseModel):
    """Error detail for response body.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        details: Optional list of field-level errors (for validation).
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Standard error response envelope."""

    error: ErrorDetail

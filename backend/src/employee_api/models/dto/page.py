"""Page envelope DTO shared by paged list endpoints."""

from collections.abc import Sequence
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """A slice of results plus pagination metadata.

    Page numbers are 0-based.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: list[T]
    total_elements: int
    total_pages: int
    number: int
    size: int
    number_of_elements: int
    first: bool
    last: bool
    empty: bool

    @classmethod
    def build(cls, items: Sequence[T], total: int, page: int, size: int) -> "PageResponse[T]":
        """Build an envelope from a page of items and the total count.

        Args:
            items: Items on the requested page
            total: Total number of matching elements
            page: 0-based page index
            size: Requested page size

        Returns:
            PageResponse
        """
        total_pages = (total + size - 1) // size if size > 0 else 0
        return cls(
            content=list(items),
            total_elements=total,
            total_pages=total_pages,
            number=page,
            size=size,
            number_of_elements=len(items),
            first=page == 0,
            last=page + 1 >= total_pages,
            empty=len(items) == 0,
        )

from typing import Generic, List, TypeVar
from enum import Enum
from pydantic import BaseModel, Field
from app.core.config import settings

T = TypeVar("T")

class SortField(str, Enum):
    CREATED_AT = "created_at"
    TOTAL_AMOUNT = "total_amount"
    ID = "id"

class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

class PageRequest(BaseModel):
    page: int = Field(1, ge=1)
    size: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)
    sort: SortField = SortField.CREATED_AT
    direction: SortDirection = SortDirection.ASC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

class Page(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    size: int
    pages: int
    has_next: bool

    @classmethod
    def build(cls, items: List[T], total: int, request: PageRequest) -> "Page[T]":
        pages = (total + request.size - 1) // request.size
        return cls(
            items=items,
            total=total,
            page=request.page,
            size=request.size,
            pages=pages,
            has_next=request.page < pages,
        )

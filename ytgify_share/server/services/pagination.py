"""Page/per_page parsing shared by every list endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Query

from ytgify_share.core.models.io.common import Pagination
from ytgify_share.server.core.constant import DEFAULT_PER_PAGE, MAX_PER_PAGE


@dataclass(frozen=True)
class PageParams:
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    @classmethod
    def build(cls, page: Optional[int] = None, per_page: Optional[int] = None) -> "PageParams":
        """Clamp raw values: page to at least 1, per_page to 1..100."""
        page = max(page if page is not None else 1, 1)
        per_page = min(max(per_page if per_page is not None else DEFAULT_PER_PAGE, 1), MAX_PER_PAGE)
        return cls(page=page, per_page=per_page)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    def meta(self, total: int) -> Pagination:
        return Pagination(page=self.page, per_page=self.per_page, total=total)


def page_params(
    page: Optional[int] = Query(default=1, description="Page number, starting at 1"),
    per_page: Optional[int] = Query(default=DEFAULT_PER_PAGE, description="Items per page (max 100)"),
) -> PageParams:
    return PageParams.build(page, per_page)

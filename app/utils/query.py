"""
Translate listing parameters into Mongo filters, sorts and page windows.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pymongo import ASCENDING, DESCENDING

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_CANDIDATE_LIMIT = 20
MAX_PAGE_SIZE = 100
# keeps the skip offset inside Mongo's 64-bit range
MAX_PAGE = 1_000_000
DEFAULT_SORT_FIELD = "createdAt"

APPLICATION_SEARCH_FIELDS = (
    "fullName",
    "email",
    "location",
    "degreeDiscipline",
    "educationStatus",
)

CANDIDATE_SEARCH_FIELDS = APPLICATION_SEARCH_FIELDS + ("aiMlProjects", "researchPapers")


@dataclass(frozen=True)
class Page:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def parse_positive_int(value: Any, default: int, maximum: Optional[int] = None) -> int:
    """Parse a query-string number; anything unusable falls back to ``default``."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    if number < 1:
        return default
    if maximum is not None and number > maximum:
        return maximum
    return number


def parse_page(page: Any, limit: Any, default_limit: int = DEFAULT_LIMIT) -> Page:
    return Page(
        page=parse_positive_int(page, DEFAULT_PAGE, maximum=MAX_PAGE),
        limit=parse_positive_int(limit, default_limit, maximum=MAX_PAGE_SIZE),
    )


def build_application_query(
    status: Optional[str] = None,
    job_id: Optional[str] = None,
    education_status: Optional[str] = None,
    search: Optional[str] = None,
    search_fields: Sequence[str] = APPLICATION_SEARCH_FIELDS,
) -> Dict[str, Any]:
    """Build a Mongo filter. Omitted parameters add no clause."""
    query: Dict[str, Any] = {}

    if status:
        query["status"] = status

    if job_id:
        query["jobId"] = job_id

    if education_status:
        query["educationStatus"] = education_status

    # Case-insensitive literal substring match on any of the search fields
    if search:
        pattern = re.escape(search)
        query["$or"] = [
            {name: {"$regex": pattern, "$options": "i"}} for name in search_fields
        ]

    return query


def build_sort(sort_by: Optional[str] = None, sort_order: Optional[str] = None) -> Tuple[str, int]:
    field = (sort_by or "").strip()
    if not field or field.startswith("$"):
        field = DEFAULT_SORT_FIELD
    direction = ASCENDING if (sort_order or "").lower() == "asc" else DESCENDING
    return field, direction


def build_pagination(page: Page, total: int, include_limit: bool = False) -> Dict[str, Any]:
    pagination = {
        "currentPage": page.page,
        "totalPages": math.ceil(total / page.limit),
        "totalApplications": total,
        "hasNextPage": page.page * page.limit < total,
        "hasPrevPage": page.page > 1,
    }
    if include_limit:
        pagination["limit"] = page.limit
    return pagination


async def fetch_page(collection, query: Dict[str, Any], sort: Tuple[str, int], page: Page) -> Tuple[List[dict], int]:
    """Run the windowed find plus the independent total count."""
    cursor = collection.find(query).sort(*sort).skip(page.skip).limit(page.limit)
    docs = await cursor.to_list(length=page.limit)
    total = await collection.count_documents(query)
    return docs, total

"""
Shared schema plumbing: camelCase wire format and the response envelope
"""
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class InputModel(CamelModel):
    """Request bodies; surrounding whitespace is trimmed before length checks"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        str_strip_whitespace = True


def envelope(data: Any = None, message: Optional[str] = None, **extra) -> dict:
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body


def paginated(page, serialize: Callable[[Any], dict]) -> dict:
    """Render a services.pagination.Page as the list envelope"""
    items: Iterable = page.items
    return {
        "success": True,
        "count": len(page.items),
        "total": page.total,
        "page": page.page,
        "pages": page.pages,
        "data": [serialize(item) for item in items],
    }

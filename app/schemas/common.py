from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for API payloads: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class OwnerOut(ApiModel):
    """Public projection of a user shown as the owner of something."""
    username: str
    full_name: str
    avatar: str


class PublicUserOut(OwnerOut):
    id: str


class ToggleState(ApiModel):
    active: bool


def not_blank(value: str | None, field: str) -> str | None:
    """Strip; reject blank strings. None passes through (field absent)."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError(f"{field} cannot be blank")
    return value

"""Id format checks, independent of whether the row exists."""
import uuid

from app.core.errors import ValidationError


def is_valid_id(value: str | None) -> bool:
    if not value:
        return False
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def parse_id(value: str | None, label: str) -> str:
    """Return the canonical id string or raise ValidationError("Invalid <label> id")."""
    if not is_valid_id(value):
        raise ValidationError(f"Invalid {label} id")
    return str(uuid.UUID(str(value)))

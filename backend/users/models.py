from typing import Any, Dict, Optional
from pydantic import BaseModel, EmailStr, field_validator


class CreateUserRequest(BaseModel):
    email: Optional[EmailStr] = None


class UpdateUserRequest(BaseModel):
    name: str
    addressLineOne: str
    city: str
    country: str

    @field_validator("name", "addressLineOne", "city", "country")
    def not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must be a non-empty string")
        return v


def serialize_user(row: Dict[str, Any]) -> Dict[str, Any]:
    """Colonnes snake_case -> JSON camelCase exposé au front."""
    return {
        "id": row.get("id"),
        "email": row.get("email"),
        "name": row.get("name"),
        "addressLineOne": row.get("address_line_one"),
        "city": row.get("city"),
        "country": row.get("country"),
    }

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AuthUser(BaseModel):
    """
    Represents an authenticated shopper from the external identity provider.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: str = "authenticated"


class AdminClaims(BaseModel):
    """Claims carried by an admin session token."""

    model_config = ConfigDict(populate_by_name=True)

    admin_id: str = Field(..., alias="sub")
    email: str
    role: str

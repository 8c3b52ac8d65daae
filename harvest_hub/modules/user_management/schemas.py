# 📄 File: harvest_hub/modules/user_management/schemas.py
# 🧭 Purpose (Layman Explanation):
# Describes what the sign-up, log-in and profile forms may contain.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request schemas for the auth and profile endpoints. Required fields are
# declared optional so handlers can return the API's own "required" messages.
#
# 🔗 Dependencies:
# - pydantic (with email-validator for EmailStr)
#
# 🔄 Connected Modules / Calls From:
# - harvest_hub.modules.user_management.api.auth
# - harvest_hub.modules.user_management.api.profiles

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    """User registration request."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "ada@example.com",
                "password": "tomatoes-4-all",
                "name": "Ada",
                "phone": "+44 20 7946 0000",
            }
        }
    )

    email: Optional[EmailStr] = Field(default=None, description="User's email address")
    password: Optional[str] = Field(default=None, max_length=128, description="User's password")
    name: Optional[str] = Field(default=None, max_length=100, description="Display name")
    phone: Optional[str] = Field(default=None, max_length=32, description="Phone number")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        """Normalize email to lowercase."""
        return v.strip().lower() if v else v


class LoginRequest(BaseModel):
    """User login request."""

    email: Optional[EmailStr] = Field(default=None, description="User's email address")
    password: Optional[str] = Field(default=None, max_length=128, description="User's password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v


class ProfileUpdateRequest(BaseModel):
    """
    Profile update request.

    `name` is applied only when non-empty; the other fields are applied
    whenever present in the body, including null.
    """

    name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    location: Optional[str] = Field(default=None, max_length=255)
    garden_name: Optional[str] = Field(default=None, max_length=100)
    garden_size: Optional[str] = Field(default=None, max_length=50)

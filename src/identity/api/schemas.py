"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Request Schemas ---


class RegisterUserRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "Xk2pQ9aB7cUid",
                    "email": "rahul@example.com",
                    "display_name": "Rahul",
                }
            ]
        }
    }

    user_id: str = Field(..., max_length=128)
    email: str = Field(..., max_length=254)
    display_name: str | None = Field(None, max_length=100)


class AddressSchema(BaseModel):
    full_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=20)
    pincode: str | None = Field(None, max_length=10)
    address_line: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)


class UpdateProfileRequest(BaseModel):
    display_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=20)
    address: AddressSchema | None = None


class ChangeRoleRequest(BaseModel):
    role: str = Field(..., pattern="^(user|admin)$")


# --- Response Schemas ---


class UserIdResponse(BaseModel):
    user_id: str


class UserResponse(BaseModel):
    user_id: str
    email: str
    role: str
    display_name: str | None = None
    phone: str | None = None
    address: AddressSchema | None = None


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int


class StatusResponse(BaseModel):
    status: str = "ok"

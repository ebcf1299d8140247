"""FastAPI endpoints for the Identity domain."""

import json

from fastapi import APIRouter, Depends, Header, HTTPException
from protean.utils.globals import current_domain

from identity.access import require_admin
from identity.api.schemas import (
    AddressSchema,
    ChangeRoleRequest,
    RegisterUserRequest,
    StatusResponse,
    UpdateProfileRequest,
    UserIdResponse,
    UserListResponse,
    UserResponse,
)
from identity.user.profile import ChangeRole, UpdateProfile
from identity.user.queries import list_users
from identity.user.registration import RegisterUser
from identity.user.user import User

router = APIRouter(prefix="/users", tags=["users"])
admin_router = APIRouter(
    prefix="/admin/users",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def _caller(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Sign in required")
    return x_user_id


def _user_response(user) -> UserResponse:
    address = None
    if user.address:
        address = AddressSchema(
            full_name=user.address.full_name,
            phone=user.address.phone,
            pincode=user.address.pincode,
            address_line=user.address.address_line,
            city=user.address.city,
            state=user.address.state,
        )
    return UserResponse(
        user_id=str(user.id),
        email=user.email,
        role=user.role,
        display_name=user.display_name,
        phone=user.phone,
        address=address,
    )


@router.post("", status_code=201, response_model=UserIdResponse)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    command = RegisterUser(
        user_id=body.user_id,
        email=body.email,
        display_name=body.display_name,
    )
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)


@router.get("/me", response_model=UserResponse)
async def get_my_profile(user_id: str = Depends(_caller)) -> UserResponse:
    user = current_domain.repository_for(User).get(user_id)
    return _user_response(user)


@router.put("/me", response_model=StatusResponse)
async def update_my_profile(body: UpdateProfileRequest, user_id: str = Depends(_caller)) -> StatusResponse:
    command = UpdateProfile(
        user_id=user_id,
        display_name=body.display_name,
        phone=body.phone,
        address=json.dumps(body.address.model_dump()) if body.address else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.get("", response_model=UserListResponse)
async def list_all_users(role: str | None = None) -> UserListResponse:
    users = [_user_response(user) for user in list_users(role=role)]
    return UserListResponse(users=users, total=len(users))


@admin_router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str) -> UserResponse:
    user = current_domain.repository_for(User).get(user_id)
    return _user_response(user)


@admin_router.put("/{user_id}/role", response_model=StatusResponse)
async def change_user_role(user_id: str, body: ChangeRoleRequest) -> StatusResponse:
    command = ChangeRole(user_id=user_id, role=body.role)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()

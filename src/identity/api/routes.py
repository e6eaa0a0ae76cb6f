"""FastAPI endpoints for the Identity domain."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from identity.api.schemas import RegisterUserRequest, RegisterUserResponse, UserResponse
from identity.user.directory import list_users
from identity.user.registration import RegisterUser

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=201, response_model=RegisterUserResponse)
async def register_user(body: RegisterUserRequest):
    command = RegisterUser(email=body.email, name=body.name, photo_url=body.photo_url)
    result = current_domain.process(command, asynchronous=False)
    response = RegisterUserResponse(**result)
    if not response.created:
        return JSONResponse(status_code=200, content=response.model_dump())
    return response


@router.get("", response_model=list[UserResponse])
async def get_users():
    return [
        UserResponse(
            user_id=str(user.id),
            email=user.email,
            name=user.name,
            photo_url=user.photo_url,
            registered_at=user.registered_at,
        )
        for user in list_users()
    ]

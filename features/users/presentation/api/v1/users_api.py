import re
from fastapi import APIRouter, Depends, Response, status
from typing import List, NoReturn, Annotated
from uuid import UUID
from datetime import datetime

# Schemas
from pydantic import BaseModel, Field, ConfigDict

# Domain
from features.users.domain.entities.user import User as UserEntity, CreateUserRequest, UpdateUserRequest
from features.users.domain.errors import ErrorKind, classify_error

# Use Cases
from features.users.app.use_cases.create_user import CreateUserUseCase
from features.users.app.use_cases.get_user import GetUserByIdUseCase, GetUserByUsernameUseCase, GetUserByPublicIdUseCase
from features.users.app.use_cases.list_users import ListUsersUseCase
from features.users.app.use_cases.update_user import UpdateUserUseCase
from features.users.app.use_cases.delete_user import DeleteUserUseCase

from app.dependencies import UoW, get_repo
from app.exceptions import BadRequestError, NotFoundError, InternalServerError
from infrastructure.auth.api_key import require_api_key
from infrastructure.repositories.user_repository import UserRepository
from infrastructure.utils.logging_config import logger


# --- API Schemas ---
class UserResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
    id: int
    public_id: UUID = Field(serialization_alias="uuid")
    username: str; email: str; full_name: str
    created_at: datetime; updated_at: datetime


# --- Repository Dependency ---
UserRepo = Annotated[UserRepository, Depends(get_repo(UserEntity))]

# --- API Router ---
router = APIRouter(prefix="/users", tags=["Users - CRUD"], dependencies=[Depends(require_api_key)])

# Base-10 ASCII digits within the signed 64-bit range
ID_REGEX = re.compile(r"[+-]?[0-9]+")
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1


def _parse_id(raw: str) -> int:
    if not ID_REGEX.fullmatch(raw): raise BadRequestError("invalid id")
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX: raise BadRequestError("invalid id")
    return value


def _raise_http_error(exc: Exception, action: str) -> NoReturn:
    """Translates an error from the use-case layer into the matching HTTP error."""
    kind = classify_error(exc)
    if kind is ErrorKind.VALIDATION:
        raise BadRequestError(str(exc)) from exc
    if kind is ErrorKind.NOT_FOUND:
        raise NotFoundError("user not found") from exc
    logger.exception(f"API Error {action}")
    raise InternalServerError(f"Failed {action}") from exc


# --- Endpoints ---
@router.get("", response_model=List[UserResponseSchema], summary="List Users")
async def list_users_endpoint(user_repo: UserRepo):
    try: return await ListUsersUseCase(user_repo).execute()
    except Exception as e: _raise_http_error(e, "list users")

@router.get("/username/{username}", response_model=UserResponseSchema, summary="Get User by Username")
async def get_user_by_username_endpoint(username: str, user_repo: UserRepo):
    try: return await GetUserByUsernameUseCase(user_repo).execute(username)
    except Exception as e: _raise_http_error(e, "get user")

@router.get("/id/{user_id}", response_model=UserResponseSchema, summary="Get User by ID")
async def get_user_by_id_endpoint(user_id: str, user_repo: UserRepo):
    parsed_id = _parse_id(user_id)
    try: return await GetUserByIdUseCase(user_repo).execute(parsed_id)
    except Exception as e: _raise_http_error(e, "get user")

@router.get("/uuid/{public_id}", response_model=UserResponseSchema, summary="Get User by UUID")
async def get_user_by_public_id_endpoint(public_id: str, user_repo: UserRepo):
    try: return await GetUserByPublicIdUseCase(user_repo).execute(public_id)
    except Exception as e: _raise_http_error(e, "get user")

@router.post("", response_model=UserResponseSchema, status_code=status.HTTP_201_CREATED, summary="Create User")
async def create_user_endpoint(data: CreateUserRequest, user_repo: UserRepo, uow: UoW):
    try: return await CreateUserUseCase(user_repo, uow).execute(data)
    except Exception as e: _raise_http_error(e, "create user")

@router.patch("/{public_id}", response_model=UserResponseSchema, summary="Update User")
async def update_user_endpoint(public_id: str, data: UpdateUserRequest, user_repo: UserRepo, uow: UoW):
    try: return await UpdateUserUseCase(user_repo, uow).execute(public_id, data)
    except Exception as e: _raise_http_error(e, "update user")

@router.delete("/{public_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete User")
async def delete_user_endpoint(public_id: str, user_repo: UserRepo, uow: UoW):
    try: await DeleteUserUseCase(user_repo, uow).execute(public_id)
    except Exception as e: _raise_http_error(e, "delete user")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

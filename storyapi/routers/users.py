from __future__ import annotations

from fastapi import APIRouter, Path, Request

from storyapi.core.responses import success_response
from storyapi.routers import get_state_service
from storyapi.schemas import UserOut, UserPayload
from storyapi.services.user_service import UserService

router = APIRouter(prefix="/api/user", tags=["users"])


def _service(request: Request) -> UserService:
    return get_state_service(request, "user_service")


@router.post("/create", status_code=201)
def create_user(payload: UserPayload, request: Request):
    user_id = _service(request).create(payload)
    return success_response({"id": user_id}, status_code=201)


@router.get("/{user_id}")
def find_user(request: Request, user_id: int = Path(gt=0)):
    user = _service(request).find_by_id(user_id)
    return success_response({"user": UserOut.model_validate(user)})


@router.get("/")
def find_users(request: Request):
    users = _service(request).find_users()
    return success_response({"users": [UserOut.model_validate(u) for u in users]})


@router.patch("/{user_id}")
def update_user(payload: UserPayload, request: Request, user_id: int = Path(gt=0)):
    _service(request).update(user_id, payload)
    return success_response()


@router.delete("/{user_id}")
def delete_user(request: Request, user_id: int = Path(gt=0)):
    _service(request).delete_by_id(user_id)
    return success_response()

from __future__ import annotations

from fastapi import APIRouter, Request

from storyapi.core.responses import success_response
from storyapi.routers import get_state_service
from storyapi.schemas import LoginPayload
from storyapi.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
def login(payload: LoginPayload, request: Request):
    svc: AuthService = get_state_service(request, "auth_service")
    result = svc.login(payload.login, payload.password)
    return success_response({"user_id": result.user_id, "refresh_token": result.refresh_token})

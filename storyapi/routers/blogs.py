from __future__ import annotations

from fastapi import APIRouter, Path, Request

from storyapi.core.responses import success_response
from storyapi.routers import get_state_service
from storyapi.schemas import BlogOut, BlogPayload
from storyapi.services.blog_service import BlogService

router = APIRouter(prefix="/api/blog", tags=["blogs"])


def _service(request: Request) -> BlogService:
    return get_state_service(request, "blog_service")


@router.post("/create", status_code=201)
def create_blog(payload: BlogPayload, request: Request):
    blog_id = _service(request).create(payload)
    return success_response({"id": blog_id}, status_code=201)


@router.get("/{blog_id}")
def find_blog(request: Request, blog_id: int = Path(gt=0)):
    blog = _service(request).find_by_id(blog_id)
    return success_response({"blog": BlogOut.model_validate(blog)})


@router.get("/")
def find_blogs(request: Request):
    blogs = _service(request).find_blogs()
    return success_response({"blogs": [BlogOut.model_validate(b) for b in blogs]})


@router.patch("/{blog_id}")
def update_blog(payload: BlogPayload, request: Request, blog_id: int = Path(gt=0)):
    _service(request).update(blog_id, payload)
    return success_response()


@router.delete("/{blog_id}")
def delete_blog(request: Request, blog_id: int = Path(gt=0)):
    _service(request).delete_by_id(blog_id)
    return success_response()

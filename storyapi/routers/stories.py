from __future__ import annotations

from fastapi import APIRouter, Path, Request

from storyapi.core.responses import success_response
from storyapi.routers import get_state_service
from storyapi.schemas import StoryOut, StoryPayload
from storyapi.services.story_service import StoryService

router = APIRouter(prefix="/api/story", tags=["stories"])


def _service(request: Request) -> StoryService:
    return get_state_service(request, "story_service")


@router.post("/create", status_code=201)
def create_story(payload: StoryPayload, request: Request):
    story_id = _service(request).create(payload)
    return success_response({"id": story_id}, status_code=201)


@router.get("/{story_id}")
def find_story(request: Request, story_id: int = Path(gt=0)):
    story = _service(request).find_by_id(story_id)
    return success_response({"story": StoryOut.model_validate(story)})


@router.get("/")
def find_stories(request: Request):
    stories = _service(request).find_stories()
    return success_response({"stories": [StoryOut.model_validate(s) for s in stories]})


@router.patch("/{story_id}")
def update_story(payload: StoryPayload, request: Request, story_id: int = Path(gt=0)):
    _service(request).update(story_id, payload)
    return success_response()


@router.delete("/{story_id}")
def delete_story(request: Request, story_id: int = Path(gt=0)):
    _service(request).delete_by_id(story_id)
    return success_response()

"""Version 1 of the JSON API."""
from fastapi import APIRouter

from zippyboards.api.v1 import auth, members, projects, tasks, waitlist

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(members.router, prefix="/projects", tags=["members"])
api_router.include_router(tasks.router, tags=["tasks"])
api_router.include_router(waitlist.router, prefix="/waitlist", tags=["waitlist"])

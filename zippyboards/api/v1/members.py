"""Project member endpoints"""
from typing import List

from fastapi import APIRouter, Depends, status

from zippyboards.actions import members as member_actions
from zippyboards.actions import projects as project_actions
from zippyboards.api.responses import unwrap
from zippyboards.cache import PageCache
from zippyboards.data_service import DataServiceClient
from zippyboards.dependencies import get_admin_client, get_client, get_page_cache
from zippyboards.schemas import MemberAdd, ProjectMemberResponse

router = APIRouter()


@router.get("/{project_id}/members", response_model=List[ProjectMemberResponse])
def list_members(project_id: str, client: DataServiceClient = Depends(get_client)):
    return unwrap(project_actions.list_members(client, project_id))


@router.post(
    "/{project_id}/members",
    response_model=ProjectMemberResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_member(
    project_id: str,
    member_in: MemberAdd,
    client: DataServiceClient = Depends(get_client),
    admin: DataServiceClient = Depends(get_admin_client),
    cache: PageCache = Depends(get_page_cache),
):
    return unwrap(member_actions.add_member(client, admin, project_id, member_in.email, cache))


@router.delete("/{project_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    project_id: str,
    user_id: str,
    client: DataServiceClient = Depends(get_client),
    admin: DataServiceClient = Depends(get_admin_client),
    cache: PageCache = Depends(get_page_cache),
):
    unwrap(member_actions.remove_member(client, admin, project_id, user_id, cache))

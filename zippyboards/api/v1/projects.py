"""Project endpoints"""
from typing import List

from fastapi import APIRouter, Depends, status

from zippyboards.actions import projects as project_actions
from zippyboards.api.responses import unwrap
from zippyboards.cache import PageCache
from zippyboards.data_service import DataServiceClient
from zippyboards.dependencies import get_client, get_page_cache
from zippyboards.schemas import ProjectCreate, ProjectPage, ProjectResponse

router = APIRouter()


@router.get("", response_model=List[ProjectResponse])
def list_projects(client: DataServiceClient = Depends(get_client)):
    return unwrap(project_actions.list_projects(client))


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(project_in: ProjectCreate, client: DataServiceClient = Depends(get_client)):
    return unwrap(project_actions.create_project(client, project_in.name, project_in.description))


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(project_id: str, client: DataServiceClient = Depends(get_client)):
    return unwrap(project_actions.get_project(client, project_id))


@router.get("/{project_id}/page", response_model=ProjectPage)
def get_project_page(
    project_id: str,
    client: DataServiceClient = Depends(get_client),
    cache: PageCache = Depends(get_page_cache),
):
    return unwrap(project_actions.project_page(client, project_id, cache))

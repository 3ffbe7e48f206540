"""Waitlist endpoint"""
from fastapi import APIRouter, Depends, status

from zippyboards.actions.waitlist import join_waitlist
from zippyboards.api.responses import unwrap
from zippyboards.data_service import DataServiceClient
from zippyboards.dependencies import get_client
from zippyboards.schemas import WaitlistJoin, WaitlistResponse

router = APIRouter()


@router.post("", response_model=WaitlistResponse, status_code=status.HTTP_201_CREATED)
def join(entry: WaitlistJoin, client: DataServiceClient = Depends(get_client)):
    return unwrap(join_waitlist(client, entry.email))

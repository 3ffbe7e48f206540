"""Authentication endpoints"""
from fastapi import APIRouter, Depends, HTTPException, status

from zippyboards.actions import auth as auth_actions
from zippyboards.api.responses import unwrap
from zippyboards.data_service import DataServiceClient
from zippyboards.dependencies import get_client
from zippyboards.schemas import SignInRequest, SignUpRequest, UserSummary

router = APIRouter()


@router.post("/login")
def login(credentials: SignInRequest, client: DataServiceClient = Depends(get_client)):
    result = auth_actions.login(client, credentials.email, credentials.password, credentials.redirect_to)
    if "error" in result:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result["error"])
    return result


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignUpRequest, client: DataServiceClient = Depends(get_client)):
    result = auth_actions.signup(client, payload.email, payload.password)
    if "error" in result:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result["error"])
    return result


@router.post("/logout")
def logout(client: DataServiceClient = Depends(get_client)):
    return {"redirect_to": auth_actions.logout(client)}


@router.get("/session", response_model=UserSummary)
def read_session(client: DataServiceClient = Depends(get_client)):
    return unwrap(auth_actions.validate_session(client))

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from cityat.api.dependencies import get_backend_client, get_store_from_session, require_token, save_store_to_session
from cityat.core.backend_client import BackendClient, BackendError
from cityat.schemas.auth import (
    AuthStatusResponse,
    FacebookLoginRequest,
    GoogleLoginRequest,
    OtpRequest,
    OtpVerifyRequest,
    ProfileUpdate,
    User,
)
from cityat.services import auth as auth_service
from cityat.state.store import AppStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def status_response(store: AppStore) -> AuthStatusResponse:
    auth = store.auth
    return AuthStatusResponse(
        is_authenticated=auth.is_authenticated,
        user=auth.user,
        is_loading=auth.is_loading,
        error=auth.error,
    )


async def run_login(request: Request, store: AppStore, call) -> AuthStatusResponse:
    """Await a login step and keep the failure in the session, so the app can show it."""
    try:
        await call
    except BackendError as e:
        save_store_to_session(request, store)
        detail = e.message
        code = status.HTTP_401_UNAUTHORIZED if e.status_code in (400, 401) else status.HTTP_502_BAD_GATEWAY
        raise HTTPException(status_code=code, detail=detail)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    save_store_to_session(request, store)
    return status_response(store)


@router.get("/me", response_model=AuthStatusResponse)
async def me(request: Request):
    return status_response(get_store_from_session(request))


@router.post("/otp/request", response_model=AuthStatusResponse)
async def otp_request(data: OtpRequest, request: Request, client: BackendClient = Depends(get_backend_client)):
    logger.info(f"Received OTP request for phone: {data.phone}")
    store = get_store_from_session(request)
    return await run_login(request, store, auth_service.request_otp(store, client, data.phone))


@router.post("/otp/verify", response_model=AuthStatusResponse)
async def otp_verify(data: OtpVerifyRequest, request: Request, client: BackendClient = Depends(get_backend_client)):
    store = get_store_from_session(request)
    return await run_login(request, store, auth_service.verify_otp(store, client, data.phone, data.otp))


@router.post("/google", response_model=AuthStatusResponse)
async def google_login(data: GoogleLoginRequest, request: Request, client: BackendClient = Depends(get_backend_client)):
    store = get_store_from_session(request)
    return await run_login(
        request, store, auth_service.login_with_google(store, client, data.access_token, data.id_token)
    )


@router.post("/facebook", response_model=AuthStatusResponse)
async def facebook_login(data: FacebookLoginRequest, request: Request, client: BackendClient = Depends(get_backend_client)):
    store = get_store_from_session(request)
    return await run_login(request, store, auth_service.login_with_facebook(store, client, data.access_token))


@router.post("/refresh", response_model=AuthStatusResponse)
async def refresh(request: Request, client: BackendClient = Depends(get_backend_client)):
    store = get_store_from_session(request)
    try:
        await auth_service.refresh_session(store, client)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except BackendError as e:
        save_store_to_session(request, store)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)

    save_store_to_session(request, store)
    return status_response(store)


@router.put("/profile", response_model=User)
async def update_profile(data: ProfileUpdate, request: Request, client: BackendClient = Depends(get_backend_client)):
    store = get_store_from_session(request)
    require_token(store)
    user = await auth_service.update_profile(store, client, data.model_dump(exclude_none=True, by_alias=True))
    save_store_to_session(request, store)
    return user


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(request: Request):
    store = get_store_from_session(request)
    auth_service.logout(store)
    save_store_to_session(request, store)
    return {"message": "Logged out successfully"}

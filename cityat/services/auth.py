import logging
from typing import Any, Dict

from cityat.core.backend_client import BackendClient, BackendError
from cityat.schemas.auth import AuthSession, TokenPair, User
from cityat.state.store import AppStore

logger = logging.getLogger(__name__)


async def request_otp(store: AppStore, client: BackendClient, phone: str) -> None:
    store.auth.login_start()
    try:
        await client.login({"phone": phone})
    except BackendError as e:
        logger.warning(f"OTP request failed for {phone}: {e.message}")
        store.auth.login_failure("Failed to send OTP")
        raise

    store.auth.is_loading = False
    store.auth.pending_phone = phone
    logger.info(f"OTP sent to {phone}")


async def verify_otp(store: AppStore, client: BackendClient, phone: str, otp: str) -> AuthSession:
    if store.auth.pending_phone != phone:
        raise ValueError("No OTP was requested for this phone number")

    store.auth.login_start()
    try:
        tokens = TokenPair.model_validate(await client.verify_otp(phone, otp))
        user = User.model_validate(await client.get_profile(tokens.token))
    except BackendError as e:
        store.auth.login_failure(e.message or "OTP verification failed")
        raise

    session = AuthSession(user=user, token=tokens.token, refresh_token=tokens.refresh_token)
    store.auth.login_success(session)
    logger.info(f"User {user.id} signed in with phone OTP")
    return session


async def _oauth_login(store: AppStore, provider: str, call) -> AuthSession:
    store.auth.login_start()
    try:
        session = AuthSession.model_validate(await call)
    except BackendError as e:
        logger.warning(f"{provider} login failed: {e.message}")
        store.auth.login_failure(e.message or f"{provider} login failed")
        raise

    store.auth.login_success(session)
    logger.info(f"User {session.user.id} signed in with {provider}")
    return session


async def login_with_google(store: AppStore, client: BackendClient, access_token: str, id_token: str) -> AuthSession:
    return await _oauth_login(store, "Google", client.google_login(access_token, id_token))


async def login_with_facebook(store: AppStore, client: BackendClient, access_token: str) -> AuthSession:
    return await _oauth_login(store, "Facebook", client.facebook_login(access_token))


async def refresh_session(store: AppStore, client: BackendClient) -> TokenPair:
    if not store.auth.refresh_token:
        raise ValueError("Not authenticated")

    try:
        tokens = TokenPair.model_validate(await client.refresh_token(store.auth.refresh_token))
    except BackendError as e:
        if e.status_code == 401:
            logger.info("Refresh token rejected, signing out")
            store.auth.logout()
        raise

    store.auth.update_tokens(tokens.token, tokens.refresh_token)
    return tokens


async def update_profile(store: AppStore, client: BackendClient, changes: Dict[str, Any]) -> User:
    if not store.auth.token:
        raise ValueError("Not authenticated")

    user = User.model_validate(await client.update_profile(store.auth.token, changes))
    store.auth.update_user(user)
    return user


def logout(store: AppStore) -> None:
    user_id = store.auth.user.id if store.auth.user else None
    store.reset()
    logger.info(f"User {user_id} signed out")

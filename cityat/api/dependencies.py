from fastapi import HTTPException, Request, status

from cityat.core.backend_client import BackendClient
from cityat.core.session_store import SessionStateStore
from cityat.state.store import AppStore

# the cookie carries only this id, the state itself stays on the server
SESSION_ID_KEY = "sid"


def get_session_state_store(request: Request) -> SessionStateStore:
    return request.app.state.session_store


def get_store_from_session(request: Request) -> AppStore:
    """Build the session's client state from its snapshot."""
    session_id = request.session.get(SESSION_ID_KEY)
    if not session_id:
        return AppStore()
    return AppStore.from_snapshot(get_session_state_store(request).load(session_id))


def save_store_to_session(request: Request, store: AppStore):
    """Write the session's client state back."""
    session_id = request.session.get(SESSION_ID_KEY)
    if not session_id:
        session_id = SessionStateStore.new_session_id()
        request.session[SESSION_ID_KEY] = session_id
    get_session_state_store(request).save(session_id, store.snapshot())


def get_backend_client(request: Request) -> BackendClient:
    return request.app.state.backend_client


def require_token(store: AppStore) -> str:
    if not store.auth.is_authenticated or not store.auth.token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return store.auth.token

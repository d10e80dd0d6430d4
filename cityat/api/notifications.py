import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from cityat.api.dependencies import get_backend_client, get_store_from_session, require_token, save_store_to_session
from cityat.core.backend_client import BackendClient
from cityat.schemas.notification import (
    LocalNotificationCreate,
    Notification,
    NotificationListResponse,
    RemoteMessage,
)
from cityat.services import notification as notification_service
from cityat.state.store import AppStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def list_response(store: AppStore) -> NotificationListResponse:
    return NotificationListResponse(
        items=store.notifications.items,
        unread_count=store.notifications.unread_count,
    )


@router.get("", response_model=NotificationListResponse)
async def list_notifications(request: Request):
    return list_response(get_store_from_session(request))


@router.post("/sync", response_model=NotificationListResponse)
async def sync(request: Request, client: BackendClient = Depends(get_backend_client)):
    store = get_store_from_session(request)
    require_token(store)
    await notification_service.sync_notifications(store, client)
    save_store_to_session(request, store)
    return list_response(store)


@router.post("/push", response_model=Notification, status_code=status.HTTP_201_CREATED)
async def receive_push(request: Request, message: RemoteMessage):
    """Record a push payload delivered to the device."""
    store = get_store_from_session(request)
    notification = notification_service.receive_remote_message(store, message)
    save_store_to_session(request, store)
    return notification


@router.post("/local", response_model=Notification, status_code=status.HTTP_201_CREATED)
async def create_local(request: Request, data: LocalNotificationCreate):
    store = get_store_from_session(request)
    notification = notification_service.create_local_notification(
        store, data.type, data.title, data.message, data.data
    )
    save_store_to_session(request, store)
    return notification


@router.put("/read-all", response_model=NotificationListResponse)
async def mark_all_read(request: Request):
    store = get_store_from_session(request)
    store.notifications.mark_all_as_read()
    save_store_to_session(request, store)
    return list_response(store)


@router.put("/{notification_id}/read", response_model=NotificationListResponse)
async def mark_read(
    request: Request,
    notification_id: str,
    client: BackendClient = Depends(get_backend_client)
):
    store = get_store_from_session(request)
    try:
        await notification_service.mark_as_read(store, client, notification_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    save_store_to_session(request, store)
    return list_response(store)

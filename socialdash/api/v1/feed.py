# socialdash/api/v1/feed.py

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from socialdash.api.v1.calendar import get_store
from socialdash.config import settings
from socialdash.core.calendar import BaseEventStore, NotFoundError, StorageError
from socialdash.core.calendar.ics import build_ics_feed
from socialdash.core.calendar.tokens import is_valid_subscription_token

# Без JWT: доступ только по токену подписки, только чтение
router = APIRouter(prefix="/v1/calendar/feed", tags=["calendar"])
log = logging.getLogger(__name__)


@router.get(
    "/{token}.ics",
    summary="iCalendar feed for a subscription token",
    response_class=Response,
)
async def export_ics(token: str, store: BaseEventStore = Depends(get_store)) -> Response:
    if not is_valid_subscription_token(token):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown calendar feed")
    try:
        subscription = await store.get_subscription_by_token(token)
        events = await store.list_events(subscription.owner_id)
    except NotFoundError as exc:
        log.info("ICS export: unknown subscription token %s...", token[:8])
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown calendar feed") from exc
    except StorageError as exc:
        log.error("ICS export: storage unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Calendar storage is unavailable"
        ) from exc

    log.info("ICS export: %d events for owner %s", len(events), subscription.owner_id)
    body = build_ics_feed(events, product_id=settings.ICS_PRODUCT_ID)
    return Response(
        content=body,
        media_type="text/calendar; charset=utf-8",
        headers={
            "Content-Disposition": 'attachment; filename="content-calendar.ics"',
            "Cache-Control": "no-store, max-age=0, must-revalidate",
        },
    )

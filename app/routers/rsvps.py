"""RSVP pages: invite list per event, invite edits, and the QR code page."""
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.context import AppContext, get_context
from app.database import get_db
from app.errors import ValidationError
from app.models.rsvp import MAX_GUEST_COUNT
from app.models.user import User
from app.routers.resource_router import (
    ResourceCall,
    ResourceConfig,
    ResourceController,
    ResourceRouter,
    redirect_to,
)
from app.services import event_service, qr_service, rsvp_service
from app.services.ownership import event_owner, rsvp_owner, verify_ownership
from app.services.validation import validate_rsvp_code

logger = logging.getLogger(__name__)

RSVP_CONFIG = ResourceConfig(
    id_param="rsvp_id",
    parent_id_param="event_id",
    resource_name="RSVP",
    base_path="/rsvps/",
)

qr_router = APIRouter()


class RSVPController(ResourceController):
    def __init__(self, context: AppContext, config: ResourceConfig = RSVP_CONFIG):
        self.context = context
        self.config = config

    def _owned_event(self, call: ResourceCall, event_id: str):
        verify_ownership(event_id, event_owner(call.db), call.user.id).raise_for_status("event")
        return event_service.get_event(call.db, event_id)

    def _owned_rsvp(self, call: ResourceCall):
        verify_ownership(call.identifier, rsvp_owner(call.db), call.user.id).raise_for_status("RSVP")
        return rsvp_service.get_rsvp(call.db, call.identifier)

    def _render(self, call: ResourceCall, event, selected=None):
        return self.context.render(call.request, "rsvps.html", {
            "user": call.user,
            "event": event,
            "rsvp_list": rsvp_service.list_rsvps(call.db, event.id),
            "selected": selected,
            "guest_options": list(range(0, MAX_GUEST_COUNT + 1)),
        })

    def list(self, call: ResourceCall):
        if not call.parent_identifier:
            raise ValidationError("An event ID or RSVP ID must be specified to view RSVPs.")
        event = self._owned_event(call, call.parent_identifier)
        return self._render(call, event)

    def show(self, call: ResourceCall):
        rsvp = self._owned_rsvp(call)
        return self._render(call, rsvp.event, selected=rsvp)

    def create(self, call: ResourceCall):
        if not call.parent_identifier:
            raise ValidationError("Event ID is required to create an RSVP.")
        event = self._owned_event(call, call.parent_identifier)
        rsvp_service.create_rsvp(call.db, event, call.param("name"))
        return redirect_to(self.config.base_path, event_id=event.id)

    def update(self, call: ResourceCall):
        rsvp = self._owned_rsvp(call)
        rsvp_service.update_rsvp(
            call.db,
            rsvp,
            name=call.param("name"),
            response=call.param("response"),
            extra_guests=call.param("extra_guests"),
        )
        return redirect_to(self.config.base_path, event_id=rsvp.event_id)

    def delete(self, call: ResourceCall):
        rsvp = self._owned_rsvp(call)
        event_id = rsvp.event_id
        rsvp_service.delete_rsvp(call.db, rsvp)
        return redirect_to(self.config.base_path, event_id=event_id)


@qr_router.get("/")
def rsvp_qr(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    context: AppContext = Depends(get_context),
):
    """QR code pointing at the public response page of one RSVP."""
    rsvp_id = validate_rsvp_code(request.query_params.get("rsvp_id", ""))
    verify_ownership(rsvp_id, rsvp_owner(db), current_user.id).raise_for_status("RSVP")
    rsvp = rsvp_service.get_rsvp(db, rsvp_id)
    public_url = qr_service.public_response_url(context.settings.APP_BASE_URL, rsvp.id)
    if not context.settings.APP_BASE_URL:
        logger.warning("APP_BASE_URL is not set; QR code for %s uses a relative URL", rsvp.id)
    return context.render(request, "rsvp_qr.html", {
        "user": current_user,
        "rsvp": rsvp,
        "event": rsvp.event,
        "qr_code": qr_service.qr_png_base64(public_url),
        "public_url": public_url,
    })


def build_router(context: AppContext) -> APIRouter:
    return ResourceRouter(RSVP_CONFIG, RSVPController(context)).build()

"""Event pages: list, create, edit (details and venue) and delete."""
import logging

from fastapi import APIRouter

from app.context import AppContext
from app.routers.resource_router import (
    ResourceCall,
    ResourceConfig,
    ResourceController,
    ResourceRouter,
    redirect_to,
)
from app.services import event_service, venue_service
from app.services.ownership import event_owner, verify_ownership

logger = logging.getLogger(__name__)

EVENT_CONFIG = ResourceConfig(id_param="event_id", resource_name="Event", base_path="/events/")

EVENT_FORM_FIELDS = (
    "title", "description", "start_time", "duration", "venue_id",
    *venue_service.VENUE_FIELDS,
)


class EventController(ResourceController):
    def __init__(self, context: AppContext, config: ResourceConfig = EVENT_CONFIG):
        self.context = context
        self.config = config

    @property
    def tz_name(self) -> str:
        return self.context.settings.DEFAULT_TIMEZONE

    def _owned_event(self, call: ResourceCall):
        verify_ownership(call.identifier, event_owner(call.db), call.user.id).raise_for_status("event")
        return event_service.get_event(call.db, call.identifier)

    def _render(self, call: ResourceCall, selected=None, show_add_venue: bool = False):
        events = event_service.list_events(call.db, call.user.id)
        return self.context.render(call.request, "events.html", {
            "user": call.user,
            "event_list": event_service.event_statistics(events),
            "selected": selected,
            "show_add_venue": show_add_venue,
            "user_venues": venue_service.list_venues(call.db, call.user.id),
            "actions": {
                "update_event_details": event_service.ACTION_UPDATE_EVENT_DETAILS,
                "show_add_venue": event_service.ACTION_SHOW_ADD_VENUE,
                "add_existing_venue": event_service.ACTION_ADD_EXISTING_VENUE,
                "create_new_venue": event_service.ACTION_CREATE_NEW_VENUE,
                "remove_venue": event_service.ACTION_REMOVE_VENUE,
            },
        })

    def list(self, call: ResourceCall):
        return self._render(call)

    def show(self, call: ResourceCall):
        event = self._owned_event(call)
        show_add_venue = call.param("action") == event_service.ACTION_SHOW_ADD_VENUE
        return self._render(call, selected=event, show_add_venue=show_add_venue)

    def create(self, call: ResourceCall):
        event_service.create_event(
            call.db,
            user_id=call.user.id,
            title=call.param("title"),
            description=call.param("description"),
            start_time=call.param("start_time"),
            duration=call.param("duration"),
            tz_name=self.tz_name,
        )
        return redirect_to(self.config.base_path)

    def update(self, call: ResourceCall):
        event = self._owned_event(call)
        form = {name: call.param(name) for name in EVENT_FORM_FIELDS}
        updated = event_service.apply_event_action(
            call.db, event, call.user.id, call.param("action"), form, self.tz_name,
        )
        if updated is None:
            return redirect_to(
                self.config.base_path,
                event_id=event.id,
                action=event_service.ACTION_SHOW_ADD_VENUE,
            )
        return redirect_to(self.config.base_path, event_id=event.id)

    def delete(self, call: ResourceCall):
        event = self._owned_event(call)
        event_service.delete_event(call.db, event)
        return redirect_to(self.config.base_path)


def build_router(context: AppContext) -> APIRouter:
    return ResourceRouter(EVENT_CONFIG, EventController(context)).build()

"""Venue pages: the caller's reusable venues."""
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
from app.services import venue_service
from app.services.ownership import venue_owner, verify_ownership

logger = logging.getLogger(__name__)

VENUE_CONFIG = ResourceConfig(id_param="venue_id", resource_name="Venue", base_path="/venues/")


class VenueController(ResourceController):
    def __init__(self, context: AppContext, config: ResourceConfig = VENUE_CONFIG):
        self.context = context
        self.config = config

    def _owned_venue(self, call: ResourceCall):
        verify_ownership(call.identifier, venue_owner(call.db), call.user.id).raise_for_status("venue")
        return venue_service.get_venue(call.db, call.identifier)

    def _form(self, call: ResourceCall) -> dict:
        return {name: call.param(name) for name in venue_service.VENUE_FIELDS}

    def _render(self, call: ResourceCall, selected=None):
        return self.context.render(call.request, "venues.html", {
            "user": call.user,
            "venue_list": venue_service.list_venues(call.db, call.user.id),
            "selected": selected,
        })

    def list(self, call: ResourceCall):
        return self._render(call)

    def show(self, call: ResourceCall):
        return self._render(call, selected=self._owned_venue(call))

    def create(self, call: ResourceCall):
        venue_service.create_venue(call.db, call.user.id, self._form(call))
        return redirect_to(self.config.base_path)

    def update(self, call: ResourceCall):
        venue = self._owned_venue(call)
        venue_service.update_venue(call.db, venue, self._form(call))
        return redirect_to(self.config.base_path)

    def delete(self, call: ResourceCall):
        venue = self._owned_venue(call)
        venue_service.delete_venue(call.db, venue)
        return redirect_to(self.config.base_path)


def build_router(context: AppContext) -> APIRouter:
    return ResourceRouter(VENUE_CONFIG, VenueController(context)).build()

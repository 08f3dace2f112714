"""Generic list/create/show/update/delete dispatch for one resource path.

A resource is served from a single URL (``/events/``, ``/rsvps/``, ...). Which
operation runs depends on the verb, on whether the resource identifier was
supplied, and on the ``_method`` override.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.auth import get_current_user
from app.database import get_db
from app.errors import MethodNotAllowedError, ValidationError
from app.models.user import User
from app.routers.params import OVERRIDABLE_METHODS, RequestParams

logger = logging.getLogger(__name__)

ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


class Operation(str, enum.Enum):
    list = "list"
    create = "create"
    show = "show"
    update = "update"
    delete = "delete"


def resolve_operation(
    method: str,
    identifier_present: bool,
    method_override: Optional[str],
    id_param: str,
) -> Operation:
    """Pick the operation for a request; first matching rule wins.

    A recognised override replaces the verb. Raises ValidationError when
    PUT/PATCH/DELETE arrive without an identifier and MethodNotAllowedError
    for any other verb.
    """
    override = (method_override or "").upper()
    if override not in OVERRIDABLE_METHODS:
        override = ""
    if override == "DELETE" and identifier_present:
        return Operation.delete
    method = (override or method).upper()
    if method == "GET":
        return Operation.show if identifier_present else Operation.list
    if method == "POST":
        return Operation.update if identifier_present else Operation.create
    if method in ("PUT", "PATCH"):
        if not identifier_present:
            raise ValidationError(f"{id_param} is required")
        return Operation.update
    if method == "DELETE":
        if not identifier_present:
            raise ValidationError(f"{id_param} is required")
        return Operation.delete
    raise MethodNotAllowedError()


@dataclass(frozen=True)
class ResourceConfig:
    id_param: str
    resource_name: str
    parent_id_param: Optional[str] = None
    base_path: str = "/"


@dataclass
class ResourceCall:
    """Everything a controller operation needs for one request."""

    request: Request
    params: RequestParams
    db: Session
    user: User
    identifier: str = ""
    parent_identifier: str = ""

    def param(self, name: str) -> str:
        return self.params.get(name)


class ResourceController:
    """Base class for resource handlers.

    Subclasses override the operations they support; the rest answer 405.
    """

    def list(self, call: ResourceCall) -> Any:
        raise MethodNotAllowedError()

    def create(self, call: ResourceCall) -> Any:
        raise MethodNotAllowedError()

    def show(self, call: ResourceCall) -> Any:
        raise MethodNotAllowedError()

    def update(self, call: ResourceCall) -> Any:
        raise MethodNotAllowedError()

    def delete(self, call: ResourceCall) -> Any:
        raise MethodNotAllowedError()


def redirect_to(path: str, **params: str) -> RedirectResponse:
    """303 to ``path`` with the non-empty ``params`` as a query string."""
    query = urlencode({key: value for key, value in params.items() if value})
    return RedirectResponse(f"{path}?{query}" if query else path, status_code=303)


class ResourceRouter:
    """Mounts a ResourceController behind the dispatch table."""

    def __init__(self, config: ResourceConfig, controller: ResourceController):
        self.config = config
        self.controller = controller

    async def dispatch(
        self,
        request: Request,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        params = RequestParams(request)
        identifier = await params.resolve(self.config.id_param)
        override = await params.method_override()
        operation = resolve_operation(request.method, bool(identifier), override, self.config.id_param)
        if request.method.upper() != "GET":
            await params.load_form()
        parent_identifier = ""
        if self.config.parent_id_param:
            parent_identifier = params.get(self.config.parent_id_param)

        logger.debug(
            "%s %s -> %s.%s",
            params.effective_method(override), request.url.path,
            self.config.resource_name, operation.value,
        )
        handler = getattr(self.controller, operation.value)
        call = ResourceCall(
            request=request,
            params=params,
            db=db,
            user=current_user,
            identifier=identifier,
            parent_identifier=parent_identifier,
        )
        return await run_in_threadpool(handler, call)

    def build(self) -> APIRouter:
        router = APIRouter()
        router.add_api_route(
            "/",
            self.dispatch,
            methods=ROUTED_METHODS,
            include_in_schema=False,
            name=f"{self.config.resource_name.lower()}_dispatch",
        )
        return router

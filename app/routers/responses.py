"""Public invite pages: no session, the invite code is the credential."""
import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.context import AppContext, get_context
from app.database import get_db
from app.errors import MethodNotAllowedError, NotFoundError
from app.models.rsvp import MAX_GUEST_COUNT, RSVP
from app.routers.params import RequestParams
from app.services import rsvp_service
from app.services.validation import validate_rsvp_code

logger = logging.getLogger(__name__)
router = APIRouter()

RESPONSE_PATH = "/response/"
THANK_YOU_PATH = "/response/thankyou"


def _find_rsvp(db: Session, code: str) -> RSVP:
    validate_rsvp_code(code)
    rsvp = db.query(RSVP).filter(RSVP.id == code).first()
    if not rsvp:
        raise NotFoundError("Invalid or expired RSVP identifier.")
    return rsvp


def _show(context: AppContext, request: Request, db: Session, code: str):
    rsvp = _find_rsvp(db, code)
    return context.render(request, "response.html", {
        "rsvp": rsvp,
        "event": rsvp.event,
        "submit_url": f"{RESPONSE_PATH}?{urlencode({'rsvp_id': rsvp.id})}",
        "guest_options": list(range(0, MAX_GUEST_COUNT + 1)),
    })


def _submit(db: Session, code: str, response: str):
    rsvp = _find_rsvp(db, code)
    rsvp_service.record_response(db, rsvp, response)
    return RedirectResponse(f"{THANK_YOU_PATH}?{urlencode({'rsvp_id': rsvp.id})}", status_code=303)


async def _respond(request: Request, db: Session, context: AppContext, code_param: str):
    params = RequestParams(request)
    code = request.query_params.get(code_param, "")
    if not code:
        code = await params.resolve(code_param)
    method = params.effective_method(await params.method_override())
    if method == "GET":
        return await run_in_threadpool(_show, context, request, db, code)
    if method in ("PUT", "PATCH") or (method == "POST" and code_param == "code"):
        response = await params.resolve("response")
        return await run_in_threadpool(_submit, db, code, response)
    raise MethodNotAllowedError()


@router.api_route("/response/", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def response_page(
    request: Request,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
):
    """Show the invite (GET) or record the answer (PUT, or POST with _method=PUT)."""
    return await _respond(request, db, context, "rsvp_id")


@router.api_route("/rsvp", methods=["GET", "POST", "PUT", "PATCH"])
async def short_response_page(
    request: Request,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
):
    """Same as /response/ but keyed by ``code``; a plain POST submits."""
    return await _respond(request, db, context, "code")


@router.get("/response/thankyou")
def thank_you(
    request: Request,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
):
    rsvp = _find_rsvp(db, request.query_params.get("rsvp_id", ""))
    return context.render(request, "thankyou.html", {
        "rsvp": rsvp,
        "message": rsvp_service.thank_you_message(rsvp),
        "change_url": f"{RESPONSE_PATH}?{urlencode({'rsvp_id': rsvp.id})}",
    })

"""Landing page and session login/logout."""
import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.auth import end_session, session_email, start_session
from app.context import AppContext, get_context
from app.database import get_db
from app.errors import NotFoundError, ValidationError
from app.services.user_service import upsert_user

logger = logging.getLogger(__name__)
router = APIRouter()

EVENTS_PATH = "/events/"


@router.get("/")
def landing(request: Request, context: AppContext = Depends(get_context)):
    """Signed-in users go straight to their events."""
    if session_email(request):
        return RedirectResponse(EVENTS_PATH, status_code=302)
    return context.render(request, "landing.html", {
        "error": request.query_params.get("error", ""),
        "login_enabled": context.settings.DEV_LOGIN_ENABLED,
    })


def _require_login_enabled(context: AppContext) -> None:
    if not context.settings.DEV_LOGIN_ENABLED:
        raise NotFoundError("Not Found")


@router.get("/login")
def login_form(request: Request, context: AppContext = Depends(get_context)):
    _require_login_enabled(context)
    return context.render(request, "landing.html", {"error": "", "login_enabled": True})


@router.post("/login")
def login(
    request: Request,
    email: str = Form(""),
    name: str = Form(""),
    picture: str = Form(""),
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
):
    """Start a session for ``email``, creating or refreshing the user row."""
    _require_login_enabled(context)
    email = email.strip().lower()
    if not email or "@" not in email:
        raise ValidationError("A valid email address is required.")
    user = upsert_user(db, email, name.strip(), picture.strip())
    start_session(request, user)
    logger.info("User %s signed in", user.id)
    return RedirectResponse(EVENTS_PATH, status_code=303)


@router.get("/logout")
def logout(request: Request):
    end_session(request)
    return RedirectResponse("/", status_code=303)


@router.get("/api/health")
def health_check():
    return {"status": "ok"}

"""Objects built once at startup and shared read-only by every request."""
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from app.auth import SESSION_USER_EMAIL
from app.config import Settings


@dataclass(frozen=True)
class AppContext:
    settings: Settings
    templates: Jinja2Templates

    def render(self, request: Request, name: str, data: Optional[dict] = None, status_code: int = 200):
        context: dict[str, Any] = {"current_user_email": request.session.get(SESSION_USER_EMAIL, "")}
        context.update(data or {})
        return self.templates.TemplateResponse(request, name, context, status_code=status_code)


def get_context(request: Request) -> AppContext:
    """Dependency returning the context stored on ``app.state``."""
    return request.app.state.context

"""Jinja2 template environment and display filters."""
from datetime import datetime
from pathlib import Path

import pytz
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).parent / "templates"
DISPLAY_TIME_FORMAT = "%a %b %d, %Y %I:%M %p"


def to_local(value: datetime, tz_name: str) -> datetime:
    """Stored naive-UTC datetime converted to ``tz_name``."""
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    return value.astimezone(pytz.timezone(tz_name))


def build_templates(tz_name: str = "UTC") -> Jinja2Templates:
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    def local_time(value, fmt: str = DISPLAY_TIME_FORMAT) -> str:
        if not value:
            return ""
        return to_local(value, tz_name).strftime(fmt)

    def form_time(value) -> str:
        if not value:
            return ""
        return to_local(value, tz_name).strftime("%Y-%m-%dT%H:%M")

    templates.env.filters["local_time"] = local_time
    templates.env.filters["form_time"] = form_time
    templates.env.globals["timezone_name"] = tz_name
    return templates

"""Request parameter lookup: query string first, then the form body.

HTML forms can only GET or POST, so a hidden ``_method`` field on a POST
stands in for PUT, PATCH and DELETE.
"""
import logging
from typing import Optional

logger = logging.getLogger(__name__)

METHOD_OVERRIDE_PARAM = "_method"
OVERRIDABLE_METHODS = ("DELETE", "PUT", "PATCH")
FORM_METHODS = ("POST", "PUT", "PATCH")


class RequestParams:
    """Named parameter access for one request.

    The body is parsed at most once, and only when a lookup misses the query
    string on a method that carries a body.
    """

    def __init__(self, request):
        self.request = request
        self.method = request.method.upper()
        self._form = None
        self._form_loaded = False

    async def load_form(self):
        if not self._form_loaded:
            self._form_loaded = True
            if self.method in FORM_METHODS:
                self._form = await self.request.form()
        return self._form

    def get(self, name: str) -> str:
        """Value from the query string, else from an already-parsed form."""
        value = self.request.query_params.get(name)
        if value:
            return value
        if self._form is not None:
            value = self._form.get(name)
            if isinstance(value, str) and value:
                return value
        return ""

    async def resolve(self, name: str) -> str:
        """Like ``get`` but parses the form when the query string misses."""
        value = self.request.query_params.get(name)
        if value:
            return value
        await self.load_form()
        return self.get(name)

    async def method_override(self) -> Optional[str]:
        """The ``_method`` value for POST requests, if it names an overridable verb."""
        if self.method != "POST":
            return None
        value = (await self.resolve(METHOD_OVERRIDE_PARAM)).strip().upper()
        if not value:
            return None
        if value not in OVERRIDABLE_METHODS:
            logger.warning(
                "Ignoring invalid %s value '%s' for %s",
                METHOD_OVERRIDE_PARAM, value, self.request.url.path,
            )
            return None
        return value

    def effective_method(self, override: Optional[str]) -> str:
        return override or self.method

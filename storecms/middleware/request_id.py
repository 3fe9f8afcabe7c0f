# storecms/middleware/request_id.py
from __future__ import annotations

import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from storecms.core.logging import request_id_var
from storecms.core.settings import settings

# accept caller-supplied ids only if they are short and header-safe
_VALID_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Correlation id per request.
    - Reuses the incoming X-Request-Id when it looks sane, otherwise mints one.
    - Exposes it on request.state, in the logging contextvar and on the response.
    """

    def __init__(self, app, header_name: str | None = None):
        super().__init__(app)
        self.header_name = header_name or settings.REQUEST_ID_HEADER

    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get(self.header_name)
        request_id = incoming if incoming and _VALID_ID.match(incoming) else uuid.uuid4().hex

        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[self.header_name] = request_id
        return response

"""Middleware для логирования входящих HTTP-запросов."""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Пишет в лог метод, путь и IP клиента для каждого запроса.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        client_ip = request.client.host if request.client else "-"
        logging.info("%s %s (ip=%s)", request.method, request.url.path, client_ip)
        return await call_next(request)

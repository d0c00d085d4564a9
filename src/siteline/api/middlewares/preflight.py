"""Answer bare OPTIONS requests.

CORS preflights (with Origin and Access-Control-Request-Method) are handled
by CORSMiddleware before they get here. Any other OPTIONS request, on any
path, gets an empty 204.
"""

from fastapi import Request, Response, status
from starlette.middleware.base import RequestResponseEndpoint


async def bare_options_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return await call_next(request)

"""FastAPI adapter – ObsMiddleware.

Derives a request-scoped :class:`~observance.facade.Obs` for every HTTP
request, exposes it as ``request.state.obs`` and runs the application inside
the request's panic guard.
"""
from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from starlette.requests import Request

from observance.facade import Obs, RequestMetadata

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send


class ObsMiddleware:
    """Pure ASGI middleware; add with ``app.add_middleware(ObsMiddleware, obs=obs)``.

    An exception escaping the application is logged with its stack trace and
    answered with a 500 JSON body if no response was started yet.
    """

    def __init__(self, app: "ASGIApp", obs: Obs) -> None:
        self.app = app
        self._obs = obs

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_obs = self._obs.copy_with_request(RequestMetadata.from_scope(scope))
        scope.setdefault("state", {})["obs"] = request_obs

        started: list[bool] = [False]

        async def send_tracking(message: Any) -> None:
            if message["type"] == "http.response.start":
                started[0] = True
            await send(message)

        guard = request_obs.panic_recover()
        async with guard:
            await self.app(scope, receive, send_tracking)

        if guard.recovered is not None and not started[0]:
            body = json.dumps({"code": "internal_error", "message": "Internal Server Error"}).encode()
            await send({"type": "http.response.start", "status": 500, "headers": [
                (b"content-type", b"application/json"),
                (b"content-length", str(len(body)).encode()),
            ]})
            await send({"type": "http.response.body", "body": body})


def get_obs(request: Request) -> Obs:
    """Request-scoped facade stored by :class:`ObsMiddleware`.

    Usable as a FastAPI dependency: ``obs: Obs = Depends(get_obs)``.
    """
    return request.scope["state"]["obs"]


__all__ = ["ObsMiddleware", "get_obs"]

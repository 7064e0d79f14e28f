"""FastAPI / ASGI adapter – request-scoped observability."""
from observance.adapters.fastapi.middleware import ObsMiddleware, get_obs

__all__ = ["ObsMiddleware", "get_obs"]

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.router import api_router
from api.dependencies.rate_limits import setup_rate_limiter, get_limiter
from infrastructure.logging import CORRELATION_ID_HEADER, bind_request_context
from infrastructure.logging import get_module_logger
from infrastructure.services import get_settings
from server.lifespan import lifespan

logger = get_module_logger()
settings = get_settings()


handler = FastAPI(
    title=settings.server.APP_TITLE,
    version=settings.GIT_SHA,
    lifespan=lifespan,
)
setup_rate_limiter(handler)
limiter = get_limiter()


@handler.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind a correlation id to every log line of the request and echo it back."""
    with bind_request_context(
        correlation_id=request.headers.get(CORRELATION_ID_HEADER),
        request_path=request.url.path,
        request_method=request.method,
    ) as correlation_id:
        response = await call_next(request)
        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response


handler.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.CORS_ALLOW_ORIGINS,
    allow_credentials="*" not in settings.server.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[CORRELATION_ID_HEADER],
)


handler.include_router(api_router)

"""
HTTP binding for the protocol dispatcher.

create_app() wires discovery and invocation routes onto a FastAPI app.
The dispatcher and auth module are injected, so tests can build an app
around fakes without touching the environment.
"""

import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from twentyi_mcp import __version__
from twentyi_mcp.errors import ErrorKind
from twentyi_mcp.modules.auth import AuthModule
from twentyi_mcp.modules.dispatcher import ProtocolDispatcher

from .models import CapabilitiesResponse, HealthResponse, InvokeRequest, InvokeResponse

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.UNKNOWN_CAPABILITY: 404,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.TRANSPORT_ERROR: 504,
    ErrorKind.UPSTREAM_PROTOCOL_ERROR: 502,
    ErrorKind.UPSTREAM_REJECTED: 502,
    ErrorKind.INTERNAL_ERROR: 500,
}


def create_app(
    dispatcher: ProtocolDispatcher,
    auth_module: AuthModule,
    cors_origins: Optional[List[str]] = None,
    shutdown_hooks: Sequence[Callable[[], Awaitable[None]]] = (),
) -> FastAPI:
    """
    Build the HTTP app.

    Args:
        dispatcher: Dispatcher over the frozen capability registry
        auth_module: API key verification for every non-health route
        cors_origins: Allowed browser origins; no CORS headers when empty
        shutdown_hooks: Awaited in order when the server stops

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"twentyi-mcp HTTP API serving {len(dispatcher.registry)} capabilities")
        yield
        for hook in shutdown_hooks:
            await hook()
        logger.info("twentyi-mcp HTTP API stopped")

    app = FastAPI(
        title="twentyi-mcp",
        description="20i hosting capabilities over HTTP",
        version=__version__,
        lifespan=lifespan,
    )

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_methods=["GET", "POST"],
            allow_headers=["X-API-Key", "Content-Type"],
        )

    # Dependency injection helpers
    async def verify_api_key(
        x_api_key: Optional[str] = Header(None, description="API key for authentication")
    ) -> Tuple[bool, Optional[str]]:
        """Verify API key and return service identity."""
        is_valid, service_identity = await auth_module.verify_api_key(x_api_key)
        if not is_valid:
            raise HTTPException(401, "Invalid API key")
        return is_valid, service_identity

    # Health/Monitoring Endpoints

    @app.get("/healthz")
    async def healthz():
        """
        Minimal health check endpoint for readiness/liveness probes.

        Unauthenticated.
        """
        return {"status": "ok"}

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check with registry summary."""
        registry = dispatcher.registry
        return HealthResponse(
            status="healthy" if len(registry) else "unhealthy",
            capabilities=len(registry),
            modules=registry.module_names,
            version=__version__,
        )

    # Capability Endpoints

    @app.get("/capabilities", response_model=CapabilitiesResponse)
    async def list_capabilities(
        auth_info: Tuple[bool, Optional[str]] = Depends(verify_api_key),
    ):
        descriptors = dispatcher.list_capabilities()
        return {
            "capabilities": [descriptor.to_dict() for descriptor in descriptors],
            "count": len(descriptors),
        }

    @app.post("/capabilities/invoke", response_model=InvokeResponse)
    async def invoke_capability(
        request: InvokeRequest,
        auth_info: Tuple[bool, Optional[str]] = Depends(verify_api_key),
    ):
        _, service_identity = auth_info
        logger.info(f"Invoke {request.name} requested by {service_identity or 'anonymous'}")

        result = await dispatcher.invoke(request.name, request.arguments)
        if result.ok:
            return result.to_dict()
        return JSONResponse(status_code=STATUS_BY_KIND[result.kind], content=result.to_dict())

    # Error handlers

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed invocation bodies are argument errors."""
        logger.info(f"Rejected malformed request to {request.url.path}")
        return JSONResponse(
            status_code=STATUS_BY_KIND[ErrorKind.INVALID_ARGUMENT],
            content={
                "ok": False,
                "error": {
                    "kind": ErrorKind.INVALID_ARGUMENT.value,
                    "message": "Request body must be an object with 'name' and 'arguments'",
                    "details": {"errors": [error.get("msg") for error in exc.errors()]},
                },
            },
        )

    return app

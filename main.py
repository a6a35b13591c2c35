"""
Main API module for File Vault.

Responsibilities:
    - Expose each user's private directory under /files for browsing and download
    - Authenticate every /files request with HTTP Basic credentials
    - Map every failure to a fixed, non-revealing plain-text response
    - Log every inbound request with its final status

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - Credential store is loaded once per app, frozen, and kept on app.state.
    - Request pipeline: authenticate (dependency) -> resolve path -> respond.

Running:
    python main.py                          # loads .env, then reads the environment
    uvicorn main:create_app --factory       # environment only (use --env-file for .env)

LLM Prompt Example:
    "Explain how to structure a FastAPI file server with an application factory,
    a per-request identity dependency, and a path guard that runs before any
    filesystem access."
"""

import logging
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from auth.config import CHALLENGE_HEADERS, UNAUTHORIZED_BODY
from auth.dependencies import get_current_identity
from auth.schemas import AuthenticatedIdentity
from file_vault.config import _Settings, load_settings
from file_vault.credentials.base import BaseCredentialStore
from file_vault.credentials.credentials_factory import get_credential_store
from file_vault.errors import (
    AuthenticationFailure,
    ConfigurationError,
    PathSafetyViolation,
    ResourceNotFound,
    UnexpectedFilesystemState,
)
from file_vault.paths.resolver import resolve
from file_vault.responder.responder import respond

FILES_ROUTES = ("/files", "/files/", "/files/{requested_path:path}")


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.INFO
    # basic console logging unless the host (uvicorn, pytest) already set handlers
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    logging.getLogger("file_vault").setLevel(level)


def create_app(
    credential_store: Optional[BaseCredentialStore] = None,
    settings: Optional[_Settings] = None,
) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        credential_store (BaseCredentialStore, optional): Pre-built user table.
            If omitted, it is loaded from USERS_JSON_PATH / FILES_PATH.
        settings (_Settings, optional): Settings to use instead of the
            environment.

    Returns:
        FastAPI: A fully configured application instance.

    Raises:
        ConfigurationError: If the credential file is missing or malformed.
            The app is never built half-configured.
    """
    settings = settings or load_settings()
    _configure_logging(settings.LOG_LEVEL)
    log = logging.getLogger("file_vault")
    access_log = logging.getLogger("file_vault.access")

    if credential_store is None:
        credential_store = get_credential_store(settings.USERS_JSON_PATH, settings.FILES_PATH)

    app = FastAPI(
        title="File Vault",
        description="Per-user private file browsing and download over HTTP Basic auth",
        # nothing but the health check is served without credentials
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.credential_store = credential_store
    app.state.settings = settings

    usernames = credential_store.usernames()
    log.info("File Vault serving %d user(s)", len(usernames))
    log.debug("Configured users: %s", ", ".join(usernames))

    # ----------------------------------------------------------------
    # Access log
    # ----------------------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception:
            access_log.exception("%s %s -> unhandled error", request.method, request.url.path)
            raise
        access_log.info("%s %s -> %d", request.method, request.url.path, response.status_code)
        return response

    # ----------------------------------------------------------------
    # Error mapping
    # ----------------------------------------------------------------
    @app.exception_handler(AuthenticationFailure)
    async def unauthorized(request: Request, exc: AuthenticationFailure) -> Response:
        log.info("401 Rejected credentials: %s", exc.reason)
        return PlainTextResponse(UNAUTHORIZED_BODY, status_code=401, headers=CHALLENGE_HEADERS)

    @app.exception_handler(PathSafetyViolation)
    @app.exception_handler(ResourceNotFound)
    async def not_found(request: Request, exc: Exception) -> Response:
        return PlainTextResponse("Not Found", status_code=404)

    @app.exception_handler(UnexpectedFilesystemState)
    async def server_error(request: Request, exc: UnexpectedFilesystemState) -> Response:
        return PlainTextResponse("Internal server error", status_code=500)

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/health_files")
    def health_files():
        return {"status": "ok"}

    async def serve_files(
        request: Request,
        identity: AuthenticatedIdentity = Depends(get_current_identity),
    ) -> Response:
        """
        Serve a file or directory listing from the caller's root.

        The relative path is the percent-decoded remainder after /files/.
        It is read from the path parameters only, so a query string can
        never supply it.

        Raises:
            PathSafetyViolation: Traversal or escape attempt (404).
            ResourceNotFound: Missing or unopenable target (404).
            UnexpectedFilesystemState: Neither file nor directory (500).
        """
        requested = request.path_params.get("requested_path", "")
        resolved = await run_in_threadpool(resolve, identity, requested)
        return await respond(resolved, settings.CHUNK_SIZE)

    for path in FILES_ROUTES:
        app.add_api_route(path, serve_files, methods=["GET"])

    return app


def main() -> None:
    """Load .env, build the app, and serve it with uvicorn."""
    load_dotenv()
    settings = load_settings()
    try:
        app = create_app(settings=settings)
    except ConfigurationError as exc:
        logging.getLogger("file_vault").critical("Cannot start: %s", exc.reason)
        raise SystemExit(1) from exc

    logging.getLogger("file_vault").info(
        "Starting webserver on %s:%d", settings.HTTP_HOST, settings.HTTP_PORT
    )
    uvicorn.run(app, host=settings.HTTP_HOST, port=settings.HTTP_PORT)


if __name__ == "__main__":
    main()

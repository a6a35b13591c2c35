"""
Responder for File Vault.

Responsibilities:
    - Stream regular files as attachments
    - Render directory listings as a plain list of links
    - Classify everything else as a server-side invariant violation

Only a ResolvedPath is accepted, so nothing in here can be reached with a
path that skipped the resolver.

Status mapping (see file_vault.errors):
    missing / vanished / unopenable  -> ResourceNotFound (404)
    neither file nor directory       -> UnexpectedFilesystemState (500)

LLM Prompt Example:
    "Show how to stream a file from an async FastAPI handler with aiofiles
     while guaranteeing the file handle is closed if the client disconnects."
"""

import html
import logging
import mimetypes
import os
from typing import AsyncIterator, List
from urllib.parse import quote

import aiofiles
import aiofiles.os
from fastapi.responses import HTMLResponse, StreamingResponse
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from ..errors import ResourceNotFound, UnexpectedFilesystemState
from ..paths.resolver import ResolvedPath, relative_to_root

log = logging.getLogger("file_vault.responder")

FILES_PREFIX = "/files/"
DEFAULT_MEDIA_TYPE = "application/octet-stream"


def guess_media_type(filename: str) -> str:
    media_type, _ = mimetypes.guess_type(filename)
    return media_type or DEFAULT_MEDIA_TYPE


def content_disposition(filename: str) -> str:
    """
    Build an attachment Content-Disposition for `filename`.

    Printable ASCII names use the quoted form; anything else (non-ASCII,
    control characters) uses the RFC 6266 `filename*` form so the header
    stays latin-1 encodable.
    """
    if filename.isascii() and filename.isprintable():
        escaped = filename.replace("\\", "\\\\").replace('"', '\\"')
        return f'attachment; filename="{escaped}"'
    return f"attachment; filename*=utf-8''{quote(filename)}"


def html_link(relative: str, text: str) -> str:
    return f'<a href="{FILES_PREFIX}{quote(relative)}">{html.escape(text)}</a><br>\n'


def list_children(resolved: ResolvedPath) -> List[str]:
    """
    Names of the immediate children of a directory, sorted.

    Best effort: if iteration fails part way, the names read so far are kept.
    Names that are not valid UTF-8 on disk are skipped, since they can be
    neither linked nor rendered.

    Raises:
        ResourceNotFound: The directory cannot be opened at all.
    """
    names: List[str] = []
    try:
        it = os.scandir(resolved.path)
    except OSError as exc:
        raise ResourceNotFound(f"cannot list {resolved.path}: {exc}") from exc
    with it:
        try:
            for entry in it:
                try:
                    entry.name.encode("utf-8")
                except UnicodeEncodeError:
                    log.debug("Skipping undecodable name %r in %s", entry.name, resolved.path)
                    continue
                names.append(entry.name)
        except OSError as exc:
            log.debug("Listing of %s cut short: %s", resolved.path, exc)
    return sorted(names)


def render_listing(resolved: ResolvedPath) -> str:
    """
    Render a directory as HTML links.

    Output:
        - A parent link first, with text '..' (left out at the user's root)
        - One link per child, in sorted order
        - Each href is '/files/<path relative to root>'; each text is that
          same relative path
    """
    parts: List[str] = []

    if not resolved.is_root:
        parent = relative_to_root(resolved.path.parent, resolved.root)
        parts.append(html_link(parent, ".."))

    for name in list_children(resolved):
        child = relative_to_root(resolved.path / name, resolved.root)
        parts.append(html_link(child, child))

    return "".join(parts)


async def _iter_file(handle, chunk_size: int) -> AsyncIterator[bytes]:
    try:
        while True:
            chunk = await handle.read(chunk_size)
            if not chunk:
                break
            yield chunk
    except OSError as exc:
        log.error("Read failed mid-stream: %s", exc)
        raise
    finally:
        # Also runs when the generator is closed after a client disconnect
        await handle.close()


async def file_response(resolved: ResolvedPath, chunk_size: int) -> StreamingResponse:
    """
    Open a regular file and stream it as an attachment.

    Raises:
        ResourceNotFound: The file could not be opened (e.g. removed after
            resolution). This is reported as 404, not 500.
    """
    try:
        handle = await aiofiles.open(resolved.path, "rb")
    except OSError as exc:
        log.debug("Open failed for %s: %s", resolved.path, exc)
        raise ResourceNotFound(f"cannot open {resolved.path}: {exc}") from exc

    return StreamingResponse(
        _iter_file(handle, chunk_size),
        media_type=guess_media_type(resolved.name),
        headers={"Content-Disposition": content_disposition(resolved.name)},
    )


async def respond(resolved: ResolvedPath, chunk_size: int) -> Response:
    """
    Produce the response for a resolved path.

    Args:
        resolved (ResolvedPath): Output of the path resolver.
        chunk_size (int): Bytes per streamed chunk for files.

    Returns:
        Response: A StreamingResponse for files, an HTMLResponse for directories.

    Raises:
        ResourceNotFound: Path no longer exists or cannot be opened.
        UnexpectedFilesystemState: Path is neither a file nor a directory.
    """
    path = resolved.path

    if not await aiofiles.os.path.exists(path):
        log.info("404 File not found: %s", path)
        raise ResourceNotFound(f"{path} does not exist")

    if await aiofiles.os.path.isfile(path):
        response = await file_response(resolved, chunk_size)
        log.info("200 Serving file %s", path)
        return response

    if await aiofiles.os.path.isdir(path):
        body = await run_in_threadpool(render_listing, resolved)
        log.info("200 Listing directory %s", path)
        return HTMLResponse(body)

    log.error("500 unexpected code path: %s is not a file or directory", path)
    raise UnexpectedFilesystemState(f"{path} is neither a regular file nor a directory")

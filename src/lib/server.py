"""
Live preview server

Routes:
    GET /slides     fresh render of the input document on every request
    WS  /ws         push channel; receives {"type":"reload"} on change
    GET /<path>     static files from the input document's directory

With watch enabled, a background task drains the FileWatcher and
broadcasts a reload message to every registered push connection.
"""

import asyncio
from pathlib import Path
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from ..config import appsettings
from ..models.render import RenderOptions
from ..models.server import PushMessage, ServerConfig, WatchTargets
from .connections import Channel, ConnectionRegistry
from .errors import DeckError, DeckDecodeError, DeckIOError, SerializationError
from .log import LOG, logger, uvicornLevel_get
from .renderer import Renderer
from .watcher import ChangeEvent, FileWatcher


ERROR_PAGE = """
<html>
<body>
    <h1>Deck encountered an unexpected error</h1>
    <p>Check the server logs</p>
</body>
</html>
"""


def file_read(path: Optional[Path]) -> Optional[str]:
    """Read a UTF-8 file, or return None when no path is configured"""
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise DeckIOError(path, e)
    except UnicodeDecodeError as e:
        raise DeckDecodeError(path, e)


def slides_render(renderer: Renderer, targets: WatchTargets) -> str:
    """Re-read every target from disk and render the full document"""
    css = file_read(targets.css)
    js = file_read(targets.js)
    markdown = file_read(targets.input)
    return renderer.render(markdown or "", css, js).document_build()


def reloadMessage_make() -> str:
    """Encode the reload push message"""
    try:
        return PushMessage(type="reload").model_dump_json()
    except ValidationError as e:
        raise SerializationError(f"Failed to encode push message: {e}")


async def reload_broadcast(events: AsyncIterator[ChangeEvent], registry: ConnectionRegistry) -> None:
    """
    Broadcast a reload message for every change event.

    Returns when the event stream ends; a stream error is logged and ends
    the task without restart.
    """
    try:
        async for event in events:
            message = reloadMessage_make()
            count = await registry.message_broadcast(message)
            LOG(f"Reload sent to {count} connection(s) after change to {event.path.name}", level=1)
    except DeckError as e:
        logger.error(f"Watch task stopped: {e}")


async def channel_forward(channel: Channel, websocket: WebSocket, connection_id: int) -> None:
    """Writer task: drain a connection's channel to its websocket, in order"""
    try:
        async for message in channel:
            await websocket.send_text(message)
    except Exception as e:
        logger.error(f"Failed to send over a websocket, connection_id: {connection_id}, error: {e}")


def app_create(renderer: Renderer, targets: WatchTargets, registry: ConnectionRegistry) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        renderer: Shared, read-only renderer
        targets: Files rendered on every request
        registry: Push connection registry

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(title="deck", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.renderer = renderer
    app.state.targets = targets
    app.state.registry = registry

    @app.exception_handler(DeckError)
    async def deckError_handle(request: Request, exc: DeckError) -> HTMLResponse:
        logger.error(f"{request.url.path}: {exc}")
        return HTMLResponse(ERROR_PAGE, status_code=500)

    # Sync endpoint: FastAPI runs it in the threadpool, keeping file I/O
    # and rendering off the event loop
    @app.get(appsettings.slides_path, response_class=HTMLResponse)
    def slides_get() -> HTMLResponse:
        return HTMLResponse(slides_render(renderer, targets))

    @app.websocket(appsettings.push_path)
    async def push_connect(websocket: WebSocket) -> None:
        await websocket.accept()
        connection_id, channel = await registry.connection_register()
        writer = asyncio.create_task(channel_forward(channel, websocket, connection_id))
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                LOG(f"Message received from connection {connection_id}: {message}", level=3)
        finally:
            await registry.connection_unregister(connection_id)
            await writer

    app.mount("/", StaticFiles(directory=str(targets.input.parent)), name="assets")
    return app


async def serve(config: ServerConfig) -> None:
    """
    Run the preview server until cancelled.

    Startup: construct the renderer (fails fast on a bad theme), start the
    watcher when requested (fails fast when a file cannot be watched),
    then bind and serve.

    Raises:
        DeckError: On startup failure
    """
    renderer = Renderer(RenderOptions(theme=config.theme, theme_dirs=tuple(config.theme_dirs)))
    targets = WatchTargets.config_resolve(config)
    registry = ConnectionRegistry()
    app = app_create(renderer, targets, registry)

    watcher: Optional[FileWatcher] = None
    reload_task: Optional["asyncio.Task[None]"] = None
    if config.watch:
        watcher = FileWatcher(targets.paths(), debounce=appsettings.watch_debounce)
        watcher.start()
        reload_task = asyncio.create_task(reload_broadcast(watcher.events(), registry))
        LOG(f"Watching {targets.input} for changes", level=1)

    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=config.host,
            port=config.port,
            log_level=uvicornLevel_get(config.verbosity),
        )
    )
    url = appsettings.slidesUrl_make(config.host, config.port, config.watch)
    LOG(f"Go to {url} to see your slides", level=1)

    try:
        await server.serve()
    finally:
        if reload_task is not None:
            reload_task.cancel()
        if watcher is not None:
            watcher.stop()


def start(config: ServerConfig) -> None:
    """Blocking server entry point; returns when the server exits"""
    asyncio.run(serve(config))

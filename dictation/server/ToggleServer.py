"""Single-instance toggle: a second launch stops the running dictation session.

The running instance serves a WebSocket on a Unix socket in the user's runtime
directory. A new instance first tries to connect; if it can, it sends a STOP
message and exits, and the running instance finishes its session.

Runs a websockets.unix_serve() loop on a daemon asyncio event loop thread.
"""

import asyncio
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional

from websockets.exceptions import ConnectionClosed, WebSocketException

logger = logging.getLogger(__name__)

STOP_MESSAGE = "STOP"
ACK_MESSAGE = "OK"


def default_socket_path(socket_name: str) -> Path:
    """Return the toggle socket path inside $XDG_RUNTIME_DIR (or /tmp)."""
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR") or "/tmp"
    return Path(runtime_dir) / socket_name


def signal_existing_instance(socket_path: Path, timeout: float = 2.0) -> bool:
    """Ask an already running instance to stop its session.

    Args:
        socket_path: Unix socket of the running instance
        timeout: Seconds to wait for the connection and the acknowledgement

    Returns:
        True if a running instance acknowledged, False if none is listening
    """
    from websockets.sync.client import unix_connect

    if not socket_path.exists():
        return False

    try:
        with unix_connect(str(socket_path), open_timeout=timeout) as websocket:
            websocket.send(STOP_MESSAGE)
            reply = websocket.recv(timeout=timeout)
    except (OSError, TimeoutError, WebSocketException) as e:
        logger.info(f"ToggleServer: no running instance at {socket_path} ({type(e).__name__})")
        return False

    logger.info(f"ToggleServer: running instance replied '{reply}'")
    return reply == ACK_MESSAGE


class ToggleServer:
    """Listens for STOP messages from newly launched instances.

    The callback runs in the event loop's default executor so a slow
    session shutdown does not block the loop.

    Args:
        socket_path: Unix socket to bind; a stale file is removed first
        on_stop: Called once per STOP message received
    """

    def __init__(self, socket_path: Path, on_stop: Callable[[], None]) -> None:
        self._socket_path = socket_path
        self._on_stop = on_stop
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_future: Optional[asyncio.Future] = None
        self._ready = threading.Event()
        self._error: Optional[BaseException] = None

    @property
    def socket_path(self) -> Path:
        return self._socket_path

    def start(self) -> None:
        """Start the event loop thread and bind the socket.

        Blocks until the server is bound.

        Raises:
            OSError: the socket could not be bound
            Exception: the server loop failed before listening
        """
        if self._socket_path.exists():
            self._socket_path.unlink()

        self._loop = asyncio.new_event_loop()
        self._ready.clear()
        self._error = None
        self._thread = threading.Thread(
            target=self._run_loop, args=(self._loop,), daemon=True, name="ToggleServer"
        )
        self._thread.start()
        self._ready.wait()
        if self._error is not None:
            raise self._error

    def stop(self, timeout: float = 5.0) -> None:
        """Stop listening, join the loop thread and remove the socket file."""
        if self._loop is None:
            return
        loop, self._loop = self._loop, None

        def _finish() -> None:
            if self._stop_future is not None and not self._stop_future.done():
                self._stop_future.set_result(None)

        try:
            loop.call_soon_threadsafe(_finish)
        except RuntimeError:
            # Loop already closed, the server thread has exited
            pass
        if self._thread is not None:
            self._thread.join(timeout=timeout)

        try:
            self._socket_path.unlink()
        except FileNotFoundError:
            pass

    def _run_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(self._serve())
        except OSError as e:
            logger.error(f"ToggleServer: cannot bind {self._socket_path}: {e}")
            self._error = e
        except Exception as e:
            logger.exception("ToggleServer: server loop failed")
            self._error = e
        finally:
            loop.close()
            # Unblock start() whether or not the socket was bound
            self._ready.set()

    async def _serve(self) -> None:
        import websockets

        self._stop_future = asyncio.get_running_loop().create_future()
        async with websockets.unix_serve(self._handle_connection, str(self._socket_path)):
            logger.info(f"ToggleServer: listening on {self._socket_path}")
            self._ready.set()
            await self._stop_future

    async def _handle_connection(self, websocket, path: str = "/") -> None:
        loop = asyncio.get_running_loop()
        try:
            async for message in websocket:
                if message != STOP_MESSAGE:
                    logger.warning(f"ToggleServer: ignoring unknown message '{message}'")
                    continue
                logger.info("ToggleServer: stop requested by a new instance")
                await websocket.send(ACK_MESSAGE)
                await loop.run_in_executor(None, self._run_callback)
        except ConnectionClosed:
            pass

    def _run_callback(self) -> None:
        try:
            self._on_stop()
        except Exception:
            logger.exception("ToggleServer: stop callback failed")

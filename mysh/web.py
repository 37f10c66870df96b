# Browser terminal: runs the interpreter in a PTY and relays it over a
# WebSocket. POSIX only, like the interpreter itself.

import asyncio
import contextlib
import json
import os
import pty
import signal
import sys
from pathlib import Path
from typing import Optional

from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route, WebSocketRoute
from starlette.staticfiles import StaticFiles
from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

BASE_DIR = Path(__file__).resolve().parent.parent
FRONTEND_DIR = BASE_DIR / "frontend"
TRACE = os.environ.get("MYSH_TRACE") == "1"


def interpreter_argv() -> list[str]:
    return [sys.executable, "-m", "mysh"]


async def root_index(request):
    return JSONResponse({"interpreter": interpreter_argv()})


class PtyProcess:
    def __init__(self, argv: Optional[list[str]] = None, cols: int = 120, rows: int = 32):
        self.argv = argv or interpreter_argv()
        self.cols = cols
        self.rows = rows
        self.pid: Optional[int] = None
        self.fd: Optional[int] = None

    def spawn(self):
        pid, fd = pty.fork()
        if pid == 0:
            # Child: sane terminal defaults, then the interpreter
            os.environ.setdefault("TERM", "xterm-256color")
            try:
                os.execvp(self.argv[0], self.argv)
            finally:
                os._exit(127)
        self.pid = pid
        self.fd = fd
        self.resize(self.cols, self.rows)
        print(f"[pty] spawned interpreter pid={self.pid} fd={self.fd} argv={self.argv}")

    def write(self, data: bytes):
        assert self.fd is not None
        os.write(self.fd, data)

    def read(self, num_bytes: int = 4096) -> bytes:
        assert self.fd is not None
        try:
            return os.read(self.fd, num_bytes)
        except OSError:
            # EIO once the child side of the PTY is gone
            return b""

    def resize(self, cols: int, rows: int):
        import fcntl, struct, termios

        assert self.fd is not None
        self.cols = cols
        self.rows = rows
        winsize = struct.pack("HHHH", rows, cols, 0, 0)
        fcntl.ioctl(self.fd, termios.TIOCSWINSZ, winsize)

    def terminate(self):
        if self.pid:
            try:
                os.kill(self.pid, signal.SIGTERM)
            except ProcessLookupError:
                pass
            self.reap()
        if self.fd is not None:
            os.close(self.fd)
            self.fd = None

    def reap(self):
        try:
            os.waitpid(self.pid, 0)
        except ChildProcessError:
            pass
        self.pid = None

    def is_alive(self) -> bool:
        if self.pid is None:
            return False
        try:
            waited_pid, _status = os.waitpid(self.pid, os.WNOHANG)
        except ChildProcessError:
            return False
        if waited_pid == 0:
            return True
        self.pid = None
        return False


async def websocket_endpoint(ws: WebSocket):
    await ws.accept()
    print("[ws] client connected")
    proc = PtyProcess()
    proc.spawn()
    loop = asyncio.get_running_loop()
    chunks: asyncio.Queue = asyncio.Queue()

    def on_readable():
        # EIO (empty read) once the interpreter exits ends the stream
        data = proc.read(4096)
        if not data:
            loop.remove_reader(proc.fd)
        chunks.put_nowait(data)

    loop.add_reader(proc.fd, on_readable)

    async def relay():
        while True:
            data = await chunks.get()
            if not data:
                break
            if TRACE:
                print(f"[pty→ws] {len(data)} bytes")
            await ws.send_bytes(data)
        if ws.application_state == WebSocketState.CONNECTED:
            await ws.close()

    relay_task = asyncio.create_task(relay())

    try:
        while True:
            msg = await ws.receive()
            if msg.get("type") == "websocket.disconnect":
                break
            if msg.get("bytes") is not None:
                proc.write(bytes(msg["bytes"]))
            elif msg.get("text") is not None:
                txt = msg["text"]
                try:
                    payload = json.loads(txt)
                except ValueError:
                    payload = None
                if isinstance(payload, dict) and payload.get("type") == "resize":
                    proc.resize(int(payload.get("cols", 120)), int(payload.get("rows", 32)))
                    continue
                proc.write(txt.encode("utf-8", errors="ignore"))
    except WebSocketDisconnect:
        pass
    finally:
        print("[ws] client disconnected")
        if proc.fd is not None:
            loop.remove_reader(proc.fd)
        relay_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await relay_task
        # kill + waitpid may block; keep it off the event loop
        await asyncio.to_thread(proc.terminate)


routes = [
    Route("/", root_index, methods=["GET"]),
    WebSocketRoute("/ws", websocket_endpoint),
]
if FRONTEND_DIR.exists():
    routes.append(Mount("/app", app=StaticFiles(directory=str(FRONTEND_DIR), html=True), name="static"))

app = Starlette(debug=False, routes=routes)


def main():
    import uvicorn

    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(app, host="0.0.0.0", port=port, reload=False)


if __name__ == "__main__":
    main()

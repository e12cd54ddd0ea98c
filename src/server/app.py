from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import threading
from typing import Literal, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from cabin import AdmissionError, Cabin, CabinSettings, MemoryLogSink, QueueSnapshot
from scheduler import Direction

logger = logging.getLogger(__name__)


class OutsideCall(BaseModel):
    floor: int
    direction: Literal["up", "down"]


class InsideCall(BaseModel):
    floor: int


class CabinManager:
    """Owns the cabin, its service thread and the WebSocket audience.

    Acts as the cabin's display sink: every snapshot is pushed to connected
    clients through the server's event loop.
    """

    def __init__(self, settings: CabinSettings, max_log_lines: int = 500) -> None:
        self.settings = settings
        self.clients: Set[WebSocket] = set()
        self._tasks: Set[asyncio.Task] = set()
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self.log = MemoryLogSink(max_lines=max_log_lines)
        self.cabin = Cabin(settings.top_floor, settings.timing, log_sink=self.log, display_sink=self)

    async def start(self) -> None:
        if self._thread is None:
            self._loop = asyncio.get_running_loop()
            self._thread = threading.Thread(target=self.cabin.run, name="cabin-service", daemon=True)
            self._thread.start()

    async def stop(self) -> None:
        if self._thread:
            self.cabin.stop()
            await asyncio.to_thread(self._thread.join, 5.0)
            if self._thread.is_alive():
                logger.warning("Cabin service thread did not stop within 5 seconds")
            self._thread = None
        self._loop = None
        # broadcasts queued by the last snapshots may still be waiting on slow clients
        while self._tasks:
            pending = list(self._tasks)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

    def show(self, snapshot: QueueSnapshot) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        payload = self.current_state(snapshot)
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(self._schedule_broadcast, payload)

    def _schedule_broadcast(self, payload: dict) -> None:
        if self.clients:
            task = asyncio.ensure_future(self.broadcast(payload))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except (WebSocketDisconnect, RuntimeError):
                logger.info("Dropping WebSocket client after failed send")
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self, snapshot: Optional[QueueSnapshot] = None) -> dict:
        snapshot = snapshot or self.cabin.snapshot()
        return {
            "top_floor": self.cabin.top_floor,
            "time_unit": self.settings.timing.time_unit,
            "running": self.cabin.running,
            "cabin": snapshot.as_dict(),
        }

    def add_outside(self, floor: int, direction: str) -> dict:
        request = self.cabin.add_outside_request(floor, Direction(direction))
        state = self.current_state()
        state["admitted"] = request.as_dict()
        return state

    def add_inside(self, floor: int) -> dict:
        request = self.cabin.add_inside_request(floor)
        state = self.current_state()
        state["admitted"] = request.as_dict()
        return state


def create_app(settings: Optional[CabinSettings] = None) -> FastAPI:
    manager = CabinManager(settings or CabinSettings.from_env())

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        await manager.start()
        try:
            yield
        finally:
            await manager.stop()

    app = FastAPI(title="LiftQueue Cabin API", lifespan=lifespan)
    app.state.manager = manager
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/state")
    async def get_state() -> dict:
        return manager.current_state()

    @app.get("/log")
    async def get_log(limit: int = 100) -> dict:
        lines = manager.log.lines
        return {"lines": lines[-limit:] if limit > 0 else []}

    @app.post("/requests/outside")
    async def add_outside_request(call: OutsideCall) -> dict:
        try:
            return manager.add_outside(call.floor, call.direction)
        except AdmissionError as exc:
            logger.info("Rejected call: %s", exc.reason)
            raise HTTPException(status_code=400, detail=exc.reason)

    @app.post("/requests/inside")
    async def add_inside_request(call: InsideCall) -> dict:
        try:
            return manager.add_inside(call.floor)
        except AdmissionError as exc:
            logger.info("Rejected call: %s", exc.reason)
            raise HTTPException(status_code=400, detail=exc.reason)

    @app.websocket("/ws/stream")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await manager.register(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            await manager.unregister(websocket)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = CabinSettings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)

"""
Update protocol for the requirements board.

BoardProtocol is the only thing that mutates the registry. For every
accepted mutation it applies the change, writes the file, and then pushes
the complete registry to every open connection:

    client frame -> validate -> mutate registry -> save file -> databaseUpdate to all

Malformed frames, unknown events and bad payloads are dropped without a
reply. A failed save is logged by the store; the in-memory change stands
and the broadcast still goes out.

The mutation step never awaits, so two mutations can't interleave on the
event loop. The sends that follow do await, so snapshot, save and
broadcast run under one lock; a slow socket delays later broadcasts
instead of letting an older snapshot arrive after a newer one.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import WebSocket
from pydantic import ValidationError

from bulletin.config import Settings
from bulletin.connections import ConnectionManager, describe
from bulletin.gate import check_password
from bulletin.models.schemas import (
    AddRequirementsBulk,
    AdminLogin,
    ClientEvent,
    ClientMessage,
    LrnsBulk,
    RemoveRequirement,
    ServerEvent,
    ServerMessage,
    StudentResult,
)
from bulletin.registry import RequirementRegistry
from bulletin.store import save_registry

logger = logging.getLogger(__name__)

Handler = Callable[[WebSocket, Any], Awaitable[None]]


class BoardProtocol:
    def __init__(
        self,
        registry: RequirementRegistry,
        connections: ConnectionManager,
        settings: Settings,
    ):
        self.registry = registry
        self.connections = connections
        self.settings = settings
        # Held from snapshot to last send, so every socket sees updates in
        # the order the mutations were applied.
        self._broadcast_lock = asyncio.Lock()

        self._handlers: dict[str, Handler] = {
            ClientEvent.student_check: self.student_check,
            ClientEvent.admin_login: self.admin_login,
            ClientEvent.add_requirements_bulk: self.add_requirements_bulk,
            ClientEvent.remove_requirements_bulk: self.remove_requirements_bulk,
            ClientEvent.remove_student_bulk: self.remove_student_bulk,
            ClientEvent.remove_requirement: self.remove_requirement,
        }

    # ── Connection lifecycle ────────────────────────────────────────

    async def connect(self, websocket: WebSocket) -> None:
        """Accept the socket and hand it the current registry."""
        async with self._broadcast_lock:
            await self.connections.connect(websocket)
            await self.connections.send(
                websocket,
                ServerMessage(event=ServerEvent.database, data=self.registry.snapshot()),
            )

    def disconnect(self, websocket: WebSocket) -> None:
        self.connections.disconnect(websocket)

    async def handle(self, websocket: WebSocket, raw: str) -> None:
        """Dispatch one text frame from `websocket`."""
        try:
            message = ClientMessage.model_validate_json(raw)
        except ValidationError:
            logger.debug("Ignoring malformed frame from %s: %.80s", describe(websocket), raw)
            return

        handler = self._handlers.get(message.event)
        if handler is None:
            logger.debug("Ignoring unknown event %r from %s", message.event, describe(websocket))
            return

        await handler(websocket, message.data)

    # ── Read-only events ────────────────────────────────────────────

    async def student_check(self, websocket: WebSocket, data: Any) -> None:
        result = self.registry.lookup(data) if isinstance(data, str) else None
        reply = StudentResult(lrn=data, result=result)
        await self.connections.send(
            websocket,
            ServerMessage(event=ServerEvent.student_result, data=reply.model_dump()),
        )

    async def admin_login(self, websocket: WebSocket, data: Any) -> None:
        payload = _parse(AdminLogin, data, ClientEvent.admin_login)
        if payload is None:
            return

        auth = check_password(payload.password, self.settings.admin_password)
        if auth.success:
            self.connections.mark_admin(websocket)
            logger.info("Admin login from %s", describe(websocket))
        else:
            logger.warning("Failed admin login from %s", describe(websocket))

        await self.connections.send(
            websocket,
            ServerMessage(event=ServerEvent.admin_auth, data=auth.model_dump(exclude_none=True)),
        )

    # ── Mutations ───────────────────────────────────────────────────

    async def add_requirements_bulk(self, websocket: WebSocket, data: Any) -> None:
        payload = _parse(AddRequirementsBulk, data, ClientEvent.add_requirements_bulk)
        if payload is None or not self._may_mutate(websocket):
            return

        self.registry.add_requirements(payload.lrns, payload.reqs)
        logger.info(
            "Added %d requirement(s) to %d student(s)", len(payload.reqs), len(payload.lrns),
        )
        await self._commit()

    async def remove_requirements_bulk(self, websocket: WebSocket, data: Any) -> None:
        payload = _parse(LrnsBulk, data, ClientEvent.remove_requirements_bulk)
        if payload is None or not self._may_mutate(websocket):
            return

        self.registry.clear_requirements(payload.lrns)
        logger.info("Cleared requirements for %d student(s)", len(payload.lrns))
        await self._commit()

    async def remove_student_bulk(self, websocket: WebSocket, data: Any) -> None:
        payload = _parse(LrnsBulk, data, ClientEvent.remove_student_bulk)
        if payload is None or not self._may_mutate(websocket):
            return

        self.registry.remove_students(payload.lrns)
        logger.info("Removed %d student(s)", len(payload.lrns))
        await self._commit()

    async def remove_requirement(self, websocket: WebSocket, data: Any) -> None:
        payload = _parse(RemoveRequirement, data, ClientEvent.remove_requirement)
        if payload is None or not self._may_mutate(websocket):
            return

        # Out-of-range index or unknown LRN: nothing saved, nothing sent.
        if not self.registry.remove_requirement(payload.lrn, payload.idx):
            return
        logger.info("Removed requirement #%d from %s", payload.idx, payload.lrn)
        await self._commit()

    # ── Helpers ─────────────────────────────────────────────────────

    def _may_mutate(self, websocket: WebSocket) -> bool:
        if not self.settings.require_admin_auth or self.connections.is_admin(websocket):
            return True
        logger.warning("Ignoring mutation from unauthenticated client %s", describe(websocket))
        return False

    async def _commit(self) -> None:
        async with self._broadcast_lock:
            snapshot = self.registry.snapshot()
            save_registry(self.settings.data_file, snapshot)
            await self.connections.broadcast(
                ServerMessage(event=ServerEvent.database_update, data=snapshot),
            )


def _parse(model, data: Any, event: str):
    """Validate a payload, or return None if it doesn't fit."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.debug("Ignoring %s with bad payload: %s", event, e.errors(include_url=False))
        return None

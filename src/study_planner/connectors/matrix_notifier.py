# src/study_planner/connectors/matrix_notifier.py

from __future__ import annotations

import contextlib
import logging

from nio import AsyncClient, RoomSendResponse

from .matrix_client import create_matrix_client

logger = logging.getLogger(__name__)


class MatrixNotifier:
    """
    Sends reminders as m.text messages into one Matrix room.

    Permission is granted once a client could be created (stored session or
    password login) and a target room is configured. Both calls must run on
    the same event loop (the reminder's).
    """

    def __init__(self, settings) -> None:
        self._settings = settings
        self._room_id = (getattr(settings, "matrix_room_id", "") or "").strip()
        self._client: AsyncClient | None = None

    async def request_permission(self) -> bool:
        if not self._room_id:
            logger.error("Matrix notifier needs PLANNER_MATRIX_ROOM_ID")
            return False
        if self._client is None:
            self._client = await create_matrix_client(self._settings)
        return self._client is not None

    async def notify(self, *, title: str, body: str) -> None:
        if self._client is None:
            raise RuntimeError("Matrix notifier used before permission was granted")

        resp = await self._client.room_send(
            room_id=self._room_id,
            message_type="m.room.message",
            content={"msgtype": "m.text", "body": f"{title}: {body}"},
            ignore_unverified_devices=True,
        )
        if not isinstance(resp, RoomSendResponse):
            raise RuntimeError(f"Matrix room_send failed: {resp!r}")
        logger.info("Reminder sent to room %s", self._room_id)

    async def close(self) -> None:
        if self._client is not None:
            with contextlib.suppress(Exception):
                await self._client.close()
            self._client = None

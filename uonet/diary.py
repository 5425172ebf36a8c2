"""
A single student diary reachable under one student-module base URL.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

from .mappers import map_notes_and_achievements
from .models import DiaryInfo, NotesAndAchievements
from .utils import handle_response, join_url

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger(__name__)


class Diary:
    """Feature calls scoped to one diary.

    Requests share the owning client's session and auto re-login.
    """

    def __init__(self, client: "Client", serialized: Dict[str, Any]):
        self.client = client
        self.info: DiaryInfo = serialized["info"]
        self.base_url: str = serialized["baseUrl"]
        self.host: str = serialized["host"]

    def serialize(self) -> Dict[str, Any]:
        return {"info": self.info, "baseUrl": self.base_url, "host": self.host}

    async def get_notes_and_achievements(self) -> NotesAndAchievements:
        url = join_url(self.base_url, "UwagiIOsiagniecia.mvc/Get")
        response = await self.client.request_with_auto_login(
            lambda: self.client.transport.post(url)
        )
        return map_notes_and_achievements(handle_response(response))

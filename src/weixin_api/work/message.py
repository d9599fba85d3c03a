"""Message push (消息推送) APIs for WeCom applications.

This module provides message-related API operations:
- Send application messages
- Update task card status
- Create, update, read and post to application group chats
- Send messages to linked corporations
- Query send statistics

Every call forwards caller-serialized JSON bytes and returns the raw response
bytes.

See: https://work.weixin.qq.com/api/doc/90000/90135/90236
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.transport import JSON_CONTENT_TYPE, Transport
from .agent import WorkAgent


class WorkMessageApi:
    """Message APIs of a WeCom application."""

    # API endpoints
    SEND_URL = "/cgi-bin/message/send"
    UPDATE_TASKCARD_URL = "/cgi-bin/message/update_taskcard"
    APPCHAT_CREATE_URL = "/cgi-bin/appchat/create"
    APPCHAT_UPDATE_URL = "/cgi-bin/appchat/update"
    APPCHAT_GET_URL = "/cgi-bin/appchat/get"
    APPCHAT_SEND_URL = "/cgi-bin/appchat/send"
    LINKEDCORP_MESSAGE_SEND_URL = "/cgi-bin/linkedcorp/message/send"
    GET_STATISTICS_URL = "/cgi-bin/message/get_statistics"

    def __init__(self, client: Transport):
        self.client = client

    @classmethod
    def from_agent(cls, agent: WorkAgent) -> WorkMessageApi:
        """Create a message API sharing the agent's transport."""
        return cls(agent.client)

    async def send(self, payload: bytes) -> bytes:
        """Send an application message (text, image, news, card, ...)."""
        return await self.client.post(self.SEND_URL, payload, JSON_CONTENT_TYPE)

    async def update_taskcard(self, payload: bytes) -> bytes:
        """Update the state of task card messages already sent."""
        return await self.client.post(self.UPDATE_TASKCARD_URL, payload, JSON_CONTENT_TYPE)

    async def appchat_create(self, payload: bytes) -> bytes:
        """Create an application group chat."""
        return await self.client.post(self.APPCHAT_CREATE_URL, payload, JSON_CONTENT_TYPE)

    async def appchat_update(self, payload: bytes) -> bytes:
        """Rename a group chat or change its owner and members."""
        return await self.client.post(self.APPCHAT_UPDATE_URL, payload, JSON_CONTENT_TYPE)

    async def appchat_get(self, params: Mapping[str, Any]) -> bytes:
        """Read a group chat, ``params`` carries the ``chatid``."""
        return await self.client.get(self.APPCHAT_GET_URL, params)

    async def appchat_send(self, payload: bytes) -> bytes:
        """Post a message to an application group chat."""
        return await self.client.post(self.APPCHAT_SEND_URL, payload, JSON_CONTENT_TYPE)

    async def linkedcorp_message_send(self, payload: bytes) -> bytes:
        """Send a message to members of linked corporations."""
        return await self.client.post(self.LINKEDCORP_MESSAGE_SEND_URL, payload, JSON_CONTENT_TYPE)

    async def get_statistics(self, payload: bytes) -> bytes:
        """Query application message send statistics."""
        return await self.client.post(self.GET_STATISTICS_URL, payload, JSON_CONTENT_TYPE)

"""
YachtBot — Slack Responder
Posts lookup replies back to the channel the request came from.
"""
import asyncio
from typing import Any, Dict, Optional

import aiohttp
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from yachtbot.config.settings import SlackSettings
from yachtbot.engines.lookup import Reply
from yachtbot.utils.logger import get_logger

logger = get_logger("slack_responder")


class SlackResponder:
    """
    Thin wrapper over the Slack Web API.
    Send failures are logged and reported as False; they never propagate
    into the event handler.
    """

    def __init__(self, settings: SlackSettings, client: Optional[AsyncWebClient] = None):
        self.settings = settings
        self._client = client
        self._message_count = 0
        self._error_count = 0

    @property
    def client(self) -> Optional[AsyncWebClient]:
        if self._client is None and self.settings.bot_token:
            self._client = AsyncWebClient(token=self.settings.bot_token)
        return self._client

    async def send(self, channel: str, reply: Reply) -> bool:
        """Post a text reply or a single attachment to channel."""
        client = self.client
        if client is None:
            logger.warning("slack_no_token")
            return False

        payload: Dict[str, Any] = {"channel": channel}
        if reply.message is not None:
            payload["text"] = reply.message.fallback
            payload["attachments"] = [reply.message.to_attachment()]
        else:
            payload["text"] = reply.text or ""

        try:
            await client.chat_postMessage(**payload)
        except SlackApiError as e:
            self._error_count += 1
            logger.error("slack_send_error", channel=channel, error=e.response.get("error"))
            return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._error_count += 1
            logger.error("slack_send_exception", channel=channel,
                         error_type=type(e).__name__, error=str(e))
            return False

        self._message_count += 1
        logger.info("slack_sent", channel=channel,
                    attachment=reply.message is not None, total_sent=self._message_count)
        return True

    @property
    def stats(self) -> Dict[str, Any]:
        return {
            "configured": bool(self.settings.bot_token) or self._client is not None,
            "messages_sent": self._message_count,
            "send_errors": self._error_count,
        }

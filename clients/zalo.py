"""
Клиент Zalo Bot API.

ZaloClient — тонкая типизированная обёртка над HTTP API платформы:
- get_updates: long polling входящих сообщений
- send_message: текстовое сообщение
- send_photo: картинка по публичному URL с подписью

Каждый ответ проверяется на двух уровнях: HTTP-статус и флаг ok в конверте.
"""

import asyncio
import json
from typing import Any, List

import aiohttp

from config import get_logger, ZALO_API_BASE, POLL_TIMEOUT, POLL_CLIENT_TIMEOUT, REQUEST_TIMEOUT
from core.errors import ApiError, TransportError
from core.models import InboundMessage, Update

from .context import ClientContext

logger = get_logger(__name__)


class ZaloClient:
    """Клиент для работы с Zalo Bot API"""

    def __init__(self, ctx: ClientContext, base_url: str = ZALO_API_BASE):
        """
        Args:
            ctx: контекст с HTTP-сессией и токеном бота
            base_url: адрес API (подменяется в тестах)
        """
        self.ctx = ctx
        self.base_url = base_url.rstrip("/")

    def _url(self, method: str) -> str:
        return f"{self.base_url}/bot{self.ctx.bot_token}/{method}"

    async def _call(self, method: str, payload: dict, timeout: float = REQUEST_TIMEOUT) -> Any:
        """POST-запрос к методу API

        Args:
            method: имя метода (getUpdates, sendMessage, sendPhoto)
            payload: тело запроса
            timeout: общий таймаут клиента в секундах

        Returns:
            Поле result из конверта

        Raises:
            TransportError: сеть, таймаут, не-2xx или нечитаемое тело
            ApiError: ok=false (текст — description платформы)
        """
        try:
            async with self.ctx.session.post(
                self._url(method),
                json=payload,
                timeout=aiohttp.ClientTimeout(total=timeout)
            ) as resp:
                text = await resp.text()
                status = resp.status
        except asyncio.TimeoutError:
            raise TransportError(f"{method}: request timeout", timeout=True)
        except aiohttp.ClientError as e:
            raise TransportError(f"{method}: {e}")

        if not 200 <= status < 300:
            raise TransportError(f"{method} failed: {status} - {text}", status=status, body=text)

        try:
            envelope = json.loads(text)
        except json.JSONDecodeError:
            raise TransportError(f"{method}: invalid JSON response", status=status, body=text)

        if not isinstance(envelope, dict):
            raise TransportError(f"{method}: unexpected response shape", status=status, body=text)

        if not envelope.get("ok"):
            description = str(envelope.get("description") or "unknown error")
            raise ApiError(description, error_code=envelope.get("error_code"))

        return envelope.get("result")

    async def get_updates(self, timeout: int = POLL_TIMEOUT) -> List[InboundMessage]:
        """Long polling новых сообщений

        Args:
            timeout: сколько сервер держит запрос (клиент ждёт чуть дольше)

        Returns:
            Список сообщений (возможно пустой)
        """
        client_timeout = timeout + (POLL_CLIENT_TIMEOUT - POLL_TIMEOUT)
        result = await self._call("getUpdates", {"timeout": timeout}, timeout=client_timeout)
        return normalize_updates(result)

    async def send_message(self, chat_id: str, text: str) -> Any:
        """Отправить текстовое сообщение"""
        result = await self._call("sendMessage", {"chat_id": chat_id, "text": text})
        logger.debug(f"Сообщение отправлено в чат {chat_id}")
        return result

    async def send_photo(self, chat_id: str, photo_url: str, caption: str = "") -> Any:
        """Отправить картинку по публичному URL"""
        result = await self._call("sendPhoto", {
            "chat_id": chat_id,
            "photo": photo_url,
            "caption": caption
        })
        logger.info(f"✅ Фото отправлено в чат {chat_id}")
        return result


def normalize_updates(result: Any) -> List[InboundMessage]:
    """Приводит result из getUpdates к списку сообщений

    Платформа возвращает одно событие, список событий или пустое/непонятное
    значение. События без сообщения пропускаются.
    """
    if isinstance(result, list):
        raw_updates = [u for u in result if isinstance(u, dict)]
    elif isinstance(result, dict) and ("message" in result or "event_name" in result):
        raw_updates = [result]
    else:
        if result:
            logger.debug(f"getUpdates: непонятный result: {result!r}")
        return []

    messages = []
    for raw in raw_updates:
        try:
            update = Update.from_dict(raw)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"⚠️ Пропускаем некорректное событие: {e}")
            continue
        if update.message is not None:
            messages.append(update.message)
        else:
            logger.debug(f"Событие без сообщения: {update.event_name}")
    return messages


async def collect_recent_chat_ids(client: ZaloClient, timeout: int = 0) -> List[str]:
    """Уникальные чаты из последних сообщений (для разовой рассылки)"""
    messages = await client.get_updates(timeout=timeout)
    return sorted({m.chat_id for m in messages})

"""
Цикл long polling.

Каждая итерация гонит наперегонки сигнал остановки и один запрос
getUpdates. Сообщения пачки обрабатываются строго по очереди. Остановка
проверяется только между итерациями: начатая доставка доходит до конца.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from config import get_logger, POLL_TIMEOUT, POLL_ERROR_BACKOFF
from core.errors import is_poll_timeout
from core.models import InboundMessage

logger = get_logger(__name__)

MessageHandlerFunc = Callable[[InboundMessage], Awaitable[None]]


class UpdatePoller:
    """Главный цикл бота"""

    def __init__(
        self,
        client,
        handler: MessageHandlerFunc,
        shutdown: Optional[asyncio.Event] = None,
        poll_timeout: int = POLL_TIMEOUT,
        error_backoff: float = POLL_ERROR_BACKOFF,
    ):
        """
        Args:
            client: ZaloClient (нужен только get_updates)
            handler: корутина-обработчик одного сообщения
            shutdown: событие остановки
            poll_timeout: серверный таймаут long polling
            error_backoff: пауза после настоящей ошибки, секунды
        """
        self.client = client
        self.handler = handler
        self.shutdown = shutdown or asyncio.Event()
        self.poll_timeout = poll_timeout
        self.error_backoff = error_backoff

    def stop(self) -> None:
        self.shutdown.set()

    async def run(self) -> None:
        """Крутится до сигнала остановки"""
        logger.info("🔄 Long polling запущен. Бот слушает сообщения")

        while not self.shutdown.is_set():
            poll = asyncio.ensure_future(self.client.get_updates(self.poll_timeout))
            stop = asyncio.ensure_future(self.shutdown.wait())
            await asyncio.wait({poll, stop}, return_when=asyncio.FIRST_COMPLETED)

            if stop.done():
                poll.cancel()
                await asyncio.gather(poll, return_exceptions=True)
                break
            stop.cancel()

            try:
                messages = poll.result()
            except Exception as e:
                if is_poll_timeout(e):
                    logger.debug("⏳ Таймаут long polling, продолжаем")
                    continue
                logger.warning(
                    f"⚠️ Ошибка getUpdates: {e}. Повтор через {self.error_backoff} с"
                )
                await self._sleep(self.error_backoff)
                continue

            if not messages:
                logger.debug("⏳ Новых сообщений нет")
                continue

            logger.info(f"📨 Получено сообщений: {len(messages)}")
            for message in messages:
                await self._dispatch(message)

        logger.info("🛑 Бот остановлен")

    async def _dispatch(self, message: InboundMessage) -> None:
        try:
            await self.handler(message)
        except Exception as e:
            logger.exception(f"❌ Ошибка обработки сообщения {message.message_id}: {e}")

    async def _sleep(self, seconds: float) -> None:
        """Пауза, прерываемая сигналом остановки"""
        try:
            await asyncio.wait_for(self.shutdown.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass

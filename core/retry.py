"""
Политика повторов: максимум попыток, фиксированная пауза, какие ошибки повторять.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 1
    delay: float = 0.0
    retry_on: Tuple[Type[BaseException], ...] = ()

    def should_retry(self, exc: BaseException, attempt: int) -> bool:
        return attempt < self.max_attempts and isinstance(exc, self.retry_on)

    async def run(
        self,
        func: Callable[[], Awaitable],
        name: str = "operation",
        on_attempt: Optional[Callable[[int], None]] = None,
    ):
        """Выполняет func с повторами

        Args:
            func: корутинная функция без аргументов
            name: имя операции для логов
            on_attempt: вызывается перед каждой попыткой с её номером

        Raises:
            Последнюю ошибку, если попытки кончились или она не повторяемая
        """
        def before(state: RetryCallState) -> None:
            if on_attempt:
                on_attempt(state.attempt_number)

        def before_sleep(state: RetryCallState) -> None:
            logger.warning(
                f"🔄 {name}: попытка {state.attempt_number}/{self.max_attempts} не удалась "
                f"({state.outcome.exception()}), повтор через {self.delay}s"
            )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self.max_attempts)),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception_type(self.retry_on),
            before=before,
            before_sleep=before_sleep,
            reraise=True,
        )
        return await retrying(func)


NO_RETRY = RetryPolicy()

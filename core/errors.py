"""
Иерархия ошибок бота.

- TransportError: сеть/HTTP упали до того, как ответ можно разобрать
- ApiError: корректный ответ с явным признаком ошибки (ok=false)
- NotFoundError: у идентификатора нет контента
- UnsupportedCategoryError: категория исключена из выборки
- RenderError: wkhtmltoimage завершился с ошибкой
- HostingError: не удалось загрузить картинку или найти релиз
"""

from typing import Optional


class BotError(Exception):
    """Базовая ошибка бота."""
    pass


class TransportError(BotError):
    """Ошибка сети или HTTP-статуса."""

    def __init__(self, message: str, status: Optional[int] = None,
                 body: str = "", timeout: bool = False):
        super().__init__(message)
        self.status = status
        self.body = body
        self.timeout = timeout


class ApiError(BotError):
    """Платформа вернула ok=false. Текст ошибки — description из ответа."""

    def __init__(self, description: str, error_code: Optional[int] = None):
        description = str(description)
        super().__init__(description)
        self.description = description
        self.error_code = error_code


class NotFoundError(BotError):
    """Вопрос не найден в источнике контента."""

    def __init__(self, question_id: str, reason: str = "not found"):
        super().__init__(f"Question {question_id}: {reason}")
        self.question_id = question_id


class UnsupportedCategoryError(BotError):
    """Категория не поддерживается выборкой (RC)."""

    def __init__(self, category):
        super().__init__(
            f"{category} questions are currently not supported due to different JSON structure"
        )
        self.category = category


class RenderError(BotError):
    """Внешний рендерер вернул ненулевой код или недоступен."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class HostingError(BotError):
    """Не удалось загрузить картинку на хостинг."""
    pass


def is_poll_timeout(exc: BaseException) -> bool:
    """Ошибка long polling, означающая просто «новых сообщений нет»

    Args:
        exc: исключение из get_updates()

    Returns:
        True для таймаутов (штатная ситуация), False для настоящих ошибок
    """
    if isinstance(exc, TransportError):
        return exc.timeout or exc.status == 408
    if isinstance(exc, ApiError):
        return exc.error_code == 408 or "timeout" in str(exc.description).lower()
    return False

"""
Ядро бота: модели и чистая логика без сети.

Содержит:
- errors.py: иерархия ошибок
- models.py: QuestionRef, QuestionContent, InboundMessage, Update
- catalog.py: QuestionCatalog — каталог вопросов по категориям
- selector.py: случайный выбор вопросов без повторов
- commands.py: разбор текста сообщения в команду
- retry.py: RetryPolicy — политика повторов
"""

from .errors import (
    BotError,
    TransportError,
    ApiError,
    NotFoundError,
    UnsupportedCategoryError,
    RenderError,
    HostingError,
    is_poll_timeout,
)

from .models import QuestionRef, QuestionContent, InboundMessage, Update
from .catalog import QuestionCatalog
from .selector import SelectionResult, select_questions
from .commands import CommandType, Command, parse_command
from .retry import RetryPolicy, NO_RETRY

__all__ = [
    # errors
    'BotError',
    'TransportError',
    'ApiError',
    'NotFoundError',
    'UnsupportedCategoryError',
    'RenderError',
    'HostingError',
    'is_poll_timeout',
    # models
    'QuestionRef',
    'QuestionContent',
    'InboundMessage',
    'Update',
    # catalog
    'QuestionCatalog',
    # selector
    'SelectionResult',
    'select_questions',
    # commands
    'CommandType',
    'Command',
    'parse_command',
    # retry
    'RetryPolicy',
    'NO_RETRY',
]

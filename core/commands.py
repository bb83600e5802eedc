"""
Разбор входящего текста в команду.

Определяет:
- request_by_id: пользователь прислал номер вопроса ("42")
- request_by_category: ключевое слово категории ("ps", "Problem Solving")
- request_random: случайный вопрос ("random", "next")
- show_help: всё остальное, включая пустой текст
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config import Category, COMMAND_WORDS

_NUMBER_RE = re.compile(r"[0-9]+")


class CommandType(Enum):
    """Типы команд"""
    SHOW_HELP = "show_help"
    REQUEST_BY_CATEGORY = "request_by_category"
    REQUEST_BY_ID = "request_by_id"
    REQUEST_RANDOM = "request_random"


@dataclass(frozen=True)
class Command:
    """Результат разбора сообщения"""
    type: CommandType
    category: Optional[Category] = None  # Для REQUEST_BY_CATEGORY
    question_id: Optional[str] = None    # Для REQUEST_BY_ID


SHOW_HELP = Command(CommandType.SHOW_HELP)


def parse_command(text: Optional[str]) -> Command:
    """Превращает текст сообщения в команду

    Числа имеют приоритет над ключевыми словами. Нераспознанный текст —
    не ошибка, а запрос справки.

    Args:
        text: текст сообщения (может быть None)

    Returns:
        Command
    """
    text = (text or "").strip()
    if not text:
        return SHOW_HELP

    if _NUMBER_RE.fullmatch(text):
        return Command(CommandType.REQUEST_BY_ID, question_id=text)

    key = " ".join(text.lstrip("/").lower().split())
    action = COMMAND_WORDS.get(key)

    if action == "random":
        return Command(CommandType.REQUEST_RANDOM)
    if action in Category.__members__:
        return Command(CommandType.REQUEST_BY_CATEGORY, category=Category(action))

    return SHOW_HELP

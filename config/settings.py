"""
Настройки бота: токены, адреса внешних сервисов, константы пайплайна.

Все значения окружения читаются при импорте, но проверяются только
явным вызовом validate_env() — чтобы тесты и режим --show-stats
работали без токенов.
"""

import logging
import os
from enum import Enum

# ============= ТОКЕНЫ И ОКРУЖЕНИЕ =============

BOT_TOKEN = os.getenv("ZALO_BOT_TOKEN")
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")
GITHUB_REPOSITORY = os.getenv("GITHUB_REPOSITORY")
USER_IDS = os.getenv("USER_IDS", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class ConfigError(Exception):
    """Не хватает обязательной конфигурации."""
    pass


def validate_env(bot_token: str = None, require_hosting: bool = True) -> None:
    """Проверяет обязательные переменные окружения

    Args:
        bot_token: токен из CLI (имеет приоритет над ZALO_BOT_TOKEN)
        require_hosting: нужен ли доступ к хостингу картинок (GitHub)

    Raises:
        ConfigError: со списком недостающих переменных
    """
    missing = []
    if not (bot_token or BOT_TOKEN):
        missing.append("ZALO_BOT_TOKEN")
    if require_hosting:
        if not GITHUB_TOKEN:
            missing.append("GITHUB_TOKEN")
        if not GITHUB_REPOSITORY:
            missing.append("GITHUB_REPOSITORY")
    if missing:
        raise ConfigError(f"Не установлены: {', '.join(missing)}")


def parse_user_ids(raw: str) -> list[str]:
    """Разбирает список получателей вида "a, b,c" без дублей, с сохранением порядка"""
    result = []
    for part in (raw or "").split(","):
        part = part.strip()
        if part and part not in result:
            result.append(part)
    return result


# ============= ЛОГИРОВАНИЕ =============

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# ============= ПУТИ =============

DEFAULT_OUTPUT_DIR = "output"

# ============= ВНЕШНИЕ СЕРВИСЫ =============

CONTENT_BASE_URL = "https://mister-teddy.github.io/gmat-database"
ZALO_API_BASE = "https://bot-api.zapps.vn"
GITHUB_API_BASE = "https://api.github.com"

# Long polling: сервер держит запрос POLL_TIMEOUT секунд, клиент ждёт чуть дольше
POLL_TIMEOUT = 30
POLL_CLIENT_TIMEOUT = 35
POLL_ERROR_BACKOFF = 5

REQUEST_TIMEOUT = 30

# Повторы стадии Fetching
FETCH_MAX_ATTEMPTS = 3
FETCH_RETRY_DELAY = 1.0

# ============= РЕНДЕРИНГ =============

RENDERER_BINARY = "wkhtmltoimage"
RENDER_WIDTH = 1200
RENDER_QUALITY = 100
RENDER_FORMAT = "png"
HEADER_COLOR = "#0068ff"

DEFAULT_CAPTION = "Here's your GMAT question! 📚"

# ============= КАТЕГОРИИ =============


class Category(str, Enum):
    """Типы вопросов GMAT (значение — ключ в index.json)"""
    RC = "RC"
    SC = "SC"
    CR = "CR"
    PS = "PS"
    DS = "DS"

    @property
    def display_name(self) -> str:
        return CATEGORY_NAMES[self]

    def __str__(self) -> str:
        return self.display_name


CATEGORY_NAMES = {
    Category.RC: "Reading Comprehension",
    Category.SC: "Sentence Correction",
    Category.CR: "Critical Reasoning",
    Category.PS: "Problem Solving",
    Category.DS: "Data Sufficiency",
}

# RC-вопросы хранятся в другом формате JSON (пассаж + несколько вопросов)
EXCLUDED_CATEGORY = Category.RC
SUPPORTED_CATEGORIES = (Category.SC, Category.CR, Category.PS, Category.DS)

# ============= КОМАНДЫ =============

# Единая таблица ключевых слов: слово → действие.
# Действие: код категории, "random" или "help".
COMMAND_WORDS = {
    # Аббревиатуры
    "rc": "RC",
    "sc": "SC",
    "cr": "CR",
    "ps": "PS",
    "ds": "DS",
    # Полные названия
    "reading comprehension": "RC",
    "sentence correction": "SC",
    "critical reasoning": "CR",
    "problem solving": "PS",
    "data sufficiency": "DS",
    # Случайный вопрос из пула по умолчанию
    "random": "random",
    "any": "random",
    "next": "random",
    "q": "random",
    # Справка
    "help": "help",
    "start": "help",
}

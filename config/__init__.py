"""
Модуль конфигурации бота.

Содержит:
- settings.py: токены, адреса сервисов, константы пайплайна, категории
- features.py: feature flags из features.yaml
"""

from .settings import (
    # Токены
    BOT_TOKEN,
    GITHUB_TOKEN,
    GITHUB_REPOSITORY,
    USER_IDS,
    ConfigError,
    validate_env,
    parse_user_ids,

    # Логирование
    get_logger,

    # Пути
    DEFAULT_OUTPUT_DIR,

    # Внешние сервисы
    CONTENT_BASE_URL,
    ZALO_API_BASE,
    GITHUB_API_BASE,
    POLL_TIMEOUT,
    POLL_CLIENT_TIMEOUT,
    POLL_ERROR_BACKOFF,
    REQUEST_TIMEOUT,
    FETCH_MAX_ATTEMPTS,
    FETCH_RETRY_DELAY,

    # Рендеринг
    RENDERER_BINARY,
    RENDER_WIDTH,
    RENDER_QUALITY,
    RENDER_FORMAT,
    HEADER_COLOR,
    DEFAULT_CAPTION,

    # Категории
    Category,
    CATEGORY_NAMES,
    EXCLUDED_CATEGORY,
    SUPPORTED_CATEGORIES,

    # Команды
    COMMAND_WORDS,
)

__all__ = [
    'BOT_TOKEN',
    'GITHUB_TOKEN',
    'GITHUB_REPOSITORY',
    'USER_IDS',
    'ConfigError',
    'validate_env',
    'parse_user_ids',
    'get_logger',
    'DEFAULT_OUTPUT_DIR',
    'CONTENT_BASE_URL',
    'ZALO_API_BASE',
    'GITHUB_API_BASE',
    'POLL_TIMEOUT',
    'POLL_CLIENT_TIMEOUT',
    'POLL_ERROR_BACKOFF',
    'REQUEST_TIMEOUT',
    'FETCH_MAX_ATTEMPTS',
    'FETCH_RETRY_DELAY',
    'RENDERER_BINARY',
    'RENDER_WIDTH',
    'RENDER_QUALITY',
    'RENDER_FORMAT',
    'HEADER_COLOR',
    'DEFAULT_CAPTION',
    'Category',
    'CATEGORY_NAMES',
    'EXCLUDED_CATEGORY',
    'SUPPORTED_CATEGORIES',
    'COMMAND_WORDS',
]

"""
Тексты ответов бота пользователю.

Хранятся в {lang}.yaml рядом с модулем. Сейчас поддерживается только
английский — весь контент базы вопросов на английском.
"""

import yaml
from pathlib import Path
from typing import Any

_translations: dict[str, dict] = {}
_locales_dir = Path(__file__).parent

SUPPORTED_LANGUAGES = ['en']
DEFAULT_LANGUAGE = 'en'


def _load_translations():
    """Загрузить все файлы текстов"""
    for lang in SUPPORTED_LANGUAGES:
        file_path = _locales_dir / f"{lang}.yaml"
        if file_path.exists():
            with open(file_path, 'r', encoding='utf-8') as f:
                _translations[lang] = yaml.safe_load(f) or {}
        else:
            _translations[lang] = {}


def _get_nested(data: dict, keys: list[str]) -> Any:
    """Получить вложенное значение по списку ключей"""
    for key in keys:
        if isinstance(data, dict) and key in data:
            data = data[key]
        else:
            return None
    return data


def t(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Получить текст по ключу.

    Args:
        key: Ключ (например, 'errors.not_found')
        lang: Код языка
        **kwargs: Переменные для подстановки в строку

    Returns:
        Текст или сам ключ, если текст не найден

    Example:
        t('errors.not_found', question_id='42')
    """
    if not _translations:
        _load_translations()

    if lang not in SUPPORTED_LANGUAGES:
        lang = DEFAULT_LANGUAGE

    value = _get_nested(_translations.get(lang, {}), key.split('.'))
    if value is None:
        return key

    if kwargs and isinstance(value, str):
        try:
            return value.format(**kwargs)
        except KeyError:
            return value
    return value


_load_translations()

"""
Feature Flags для настройки пайплайна доставки без изменения кода.

Позволяет:
- Включать повторы стадий Rendering и Hosting
- Включать параллельную рассылку получателям
- Выбирать релиз GitHub для загрузки картинок

Использование:
    from config.features import flags

    if flags.is_enabled("pipeline.parallel_recipients"):
        # Рассылаем параллельно
    attempts = flags.get("pipeline.render_attempts", 1)
"""

import os
from pathlib import Path
from typing import Any

import yaml


class FeatureFlags:
    """
    Класс для работы с feature flags.

    Загружает конфигурацию из features.yaml.
    Переменные окружения имеют приоритет над значениями в файле.

    Формат env переменных: путь с точками заменяется на подчёркивания в верхнем регистре.
    Пример: "pipeline.render_attempts" → "PIPELINE_RENDER_ATTEMPTS"
    """

    def __init__(self, config_path: str = None):
        """
        Args:
            config_path: Путь к features.yaml. По умолчанию ищет в папке config/
        """
        if config_path is None:
            config_path = Path(__file__).parent / "features.yaml"

        self._config: dict = {}
        self._load_config(config_path)

    def _load_config(self, path: Path) -> None:
        """Загружает конфигурацию из YAML файла."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            self._config = {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in features.yaml: {e}")

    def is_enabled(self, path: str) -> bool:
        """
        Проверяет, включён ли флаг.

        Args:
            path: Путь к флагу через точку (например, "pipeline.parallel_recipients")

        Returns:
            True если флаг включён, False если выключен или не найден
        """
        env_value = os.getenv(self._env_name(path))
        if env_value is not None:
            return env_value.lower() in ("true", "1", "yes", "on")

        return bool(self._get_value(path))

    def get(self, path: str, default: Any = None) -> Any:
        """
        Получает значение флага (не только boolean).

        Args:
            path: Путь к значению через точку
            default: Значение по умолчанию

        Returns:
            Значение из конфига или default
        """
        env_value = os.getenv(self._env_name(path))
        if env_value is not None:
            try:
                return int(env_value)
            except ValueError:
                return env_value

        value = self._get_value(path)
        return value if value is not None else default

    def get_int(self, path: str, default: int, minimum: int = 1) -> int:
        """Целое значение не меньше minimum; мусор в конфиге → default"""
        value = self.get(path, default)
        try:
            value = int(value)
        except (TypeError, ValueError):
            return default
        return max(minimum, value)

    @staticmethod
    def _env_name(path: str) -> str:
        return path.upper().replace(".", "_")

    def _get_value(self, path: str) -> Any:
        """Получает значение по пути через точку."""
        value = self._config
        for key in path.split("."):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return None
        return value


# Глобальный экземпляр для использования во всём приложении
flags = FeatureFlags()

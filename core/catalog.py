"""
Каталог вопросов: категория → упорядоченный список идентификаторов.

Загружается один раз при старте из index.json и дальше только читается.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from config import Category, EXCLUDED_CATEGORY


@dataclass(frozen=True)
class QuestionCatalog:
    """Неизменяемый каталог вопросов"""
    pools: Mapping[Category, Tuple[str, ...]]

    @classmethod
    def from_index(cls, data: dict) -> "QuestionCatalog":
        """Строит каталог из index.json

        Неизвестные ключи игнорируются, отсутствующие категории — пустые.
        """
        if not isinstance(data, dict):
            raise ValueError(f"index.json: ожидался объект, получен {type(data).__name__}")

        pools = {}
        for category in Category:
            ids = data.get(category.value) or []
            pools[category] = tuple(str(i) for i in ids)
        return cls(pools=MappingProxyType(pools))

    def pool(self, category: Category) -> Tuple[str, ...]:
        return self.pools.get(category, ())

    def count(self, category: Category) -> int:
        return len(self.pool(category))

    @property
    def total(self) -> int:
        return sum(len(ids) for ids in self.pools.values())

    def category_of(self, question_id: str) -> Optional[Category]:
        """Категория вопроса по идентификатору (None если такого нет)"""
        for category, ids in self.pools.items():
            if question_id in ids:
                return category
        return None

    def stats(self) -> str:
        """Текстовая сводка по категориям для --show-stats"""
        lines = ["📊 GMAT Database Statistics:", "━" * 40]
        for category in Category:
            lines.append(
                f"{category.display_name} ({category.value}): {self.count(category)} questions"
            )
        lines.append("━" * 40)
        lines.append(f"🎯 Total Questions: {self.total}")
        lines.append(
            f"⚠️  Note: {EXCLUDED_CATEGORY.value} questions are currently not supported "
            f"due to different JSON structure"
        )
        return "\n".join(lines)

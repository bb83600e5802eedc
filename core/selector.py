"""
Случайный выбор вопросов из каталога.

Выборка всегда без возвращения. Без фильтра категории все поддерживаемые
пулы объединяются, и каждый вопрос равновероятен независимо от категории.
"""

import random
from dataclasses import dataclass, field
from typing import List, Optional

from config import Category, EXCLUDED_CATEGORY, SUPPORTED_CATEGORIES, get_logger

from .catalog import QuestionCatalog
from .errors import UnsupportedCategoryError
from .models import QuestionRef

logger = get_logger(__name__)


@dataclass
class SelectionResult:
    """Результат выборки; error заполнен, если категория не поддерживается"""
    refs: List[QuestionRef] = field(default_factory=list)
    error: Optional[UnsupportedCategoryError] = None

    @property
    def unsupported(self) -> bool:
        return self.error is not None

    def __len__(self) -> int:
        return len(self.refs)

    def __iter__(self):
        return iter(self.refs)


def select_questions(
    catalog: QuestionCatalog,
    category: Optional[Category] = None,
    count: int = 1,
    rng: Optional[random.Random] = None,
) -> SelectionResult:
    """Выбирает до count вопросов без повторов

    Args:
        catalog: каталог вопросов
        category: фильтр категории (None — все поддерживаемые)
        count: сколько вопросов нужно
        rng: источник случайности (для тестов)

    Returns:
        SelectionResult; вопросов может быть меньше count, если пул меньше
    """
    rng = rng or random.Random()
    count = max(0, count)

    if category == EXCLUDED_CATEGORY:
        error = UnsupportedCategoryError(category)
        logger.warning(f"⚠️ {error}")
        return SelectionResult(error=error)

    if category is not None:
        pool = catalog.pool(category)
        picked = rng.sample(pool, min(count, len(pool)))
        return SelectionResult(refs=[QuestionRef(category, qid) for qid in picked])

    all_items = [
        QuestionRef(cat, qid)
        for cat in SUPPORTED_CATEGORIES
        for qid in catalog.pool(cat)
    ]
    picked = rng.sample(all_items, min(count, len(all_items)))
    return SelectionResult(refs=picked)

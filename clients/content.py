"""
Клиент базы вопросов GMAT (статический JSON на GitHub Pages).

- GET /index.json → категория → список идентификаторов
- GET /{id}.json  → контент вопроса
"""

import asyncio
from typing import Any

import aiohttp

from config import get_logger, CONTENT_BASE_URL, REQUEST_TIMEOUT
from core.catalog import QuestionCatalog
from core.errors import NotFoundError, TransportError
from core.models import QuestionContent

from .context import ClientContext

logger = get_logger(__name__)


class ContentClient:
    """Загрузка каталога и контента вопросов"""

    def __init__(self, ctx: ClientContext, base_url: str = CONTENT_BASE_URL):
        self.ctx = ctx
        self.base_url = base_url.rstrip("/")

    async def _get_json(self, path: str, question_id: str = None) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            async with self.ctx.session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT)
            ) as resp:
                if resp.status == 404 and question_id is not None:
                    raise NotFoundError(question_id)
                if resp.status != 200:
                    body = await resp.text()
                    raise TransportError(
                        f"GET {url} failed: {resp.status}", status=resp.status, body=body
                    )
                return await resp.json(content_type=None)
        except asyncio.TimeoutError:
            raise TransportError(f"GET {url}: request timeout", timeout=True)
        except aiohttp.ClientError as e:
            raise TransportError(f"GET {url}: {e}")
        except ValueError as e:
            raise TransportError(f"GET {url}: invalid JSON ({e})")

    async def fetch_catalog(self) -> QuestionCatalog:
        """Загружает index.json и строит каталог"""
        data = await self._get_json("index.json")
        try:
            catalog = QuestionCatalog.from_index(data)
        except ValueError as e:
            raise TransportError(str(e))
        logger.info(f"📚 Каталог загружен: {catalog.total} вопросов")
        return catalog

    async def fetch_question(self, question_id: str) -> QuestionContent:
        """Загружает контент вопроса

        Raises:
            NotFoundError: вопроса нет или он в неподдерживаемом формате
            TransportError: сеть/HTTP
        """
        logger.info(f"📥 Загружаем вопрос {question_id}")
        data = await self._get_json(f"{question_id}.json", question_id=question_id)
        return QuestionContent.from_dict(data, question_id)

"""
Общие фикстуры тестов.

Запуск: python -m pytest tests -v
"""

import os
import sys

import aiohttp
import pytest
from aiohttp.test_utils import TestServer

# Добавляем путь к проекту
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Category  # noqa: E402
from core.catalog import QuestionCatalog  # noqa: E402


INDEX = {
    "RC": ["900", "901"],
    "SC": ["100", "101", "102"],
    "CR": ["200", "201"],
    "PS": ["1", "2", "3", "4", "42"],
    "DS": ["300"],
}


@pytest.fixture
def index_data() -> dict:
    return {k: list(v) for k, v in INDEX.items()}


@pytest.fixture
def catalog() -> QuestionCatalog:
    return QuestionCatalog.from_index(INDEX)


async def run_with_server(app, fn):
    """Поднимает aiohttp-приложение и вызывает fn(session, base_url)"""
    server = TestServer(app)
    await server.start_server()
    try:
        async with aiohttp.ClientSession() as session:
            return await fn(session, str(server.make_url("")).rstrip("/"))
    finally:
        await server.close()


@pytest.fixture
def serve():
    return run_with_server


@pytest.fixture
def ps():
    return Category.PS

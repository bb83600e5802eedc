"""
Контекст внешних клиентов: одна HTTP-сессия и учётные данные.

Передаётся явно в ZaloClient, ContentClient и GitHubReleaseHost вместо
глобальных клиента и токена.
"""

from dataclasses import dataclass
from typing import Optional

import aiohttp


@dataclass(frozen=True)
class ClientContext:
    session: aiohttp.ClientSession
    bot_token: str = ""
    github_token: Optional[str] = None
    github_repository: Optional[str] = None

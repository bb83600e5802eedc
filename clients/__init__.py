"""
Клиенты для внешних API.

Содержит:
- context.py: ClientContext — HTTP-сессия и учётные данные
- zalo.py: ZaloClient для Zalo Bot API
- content.py: ContentClient для базы вопросов GMAT
- github.py: GitHubReleaseHost для хостинга картинок
"""

from .context import ClientContext
from .zalo import ZaloClient, normalize_updates, collect_recent_chat_ids
from .content import ContentClient
from .github import GitHubReleaseHost

__all__ = [
    'ClientContext',
    'ZaloClient',
    'normalize_updates',
    'collect_recent_chat_ids',
    'ContentClient',
    'GitHubReleaseHost',
]

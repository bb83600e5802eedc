"""
Хостинг картинок через GitHub Releases.

Zalo принимает фото только по публичному URL, поэтому отрендеренная
картинка загружается ассетом в релиз репозитория, а в чат уходит
browser_download_url.

GitHubReleaseHost поддерживает:
- create_release: новый релиз с тегом
- get_latest_release: последний релиз
- get_release: релиз по id
- upload_asset: загрузка файла в релиз
- upload: всё вместе — файл → публичный URL
"""

import asyncio
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiohttp

from config import get_logger, GITHUB_API_BASE, REQUEST_TIMEOUT
from core.errors import HostingError

from .context import ClientContext

logger = get_logger(__name__)

_URI_TEMPLATE_RE = re.compile(r"\{[^}]*\}$")


class GitHubReleaseHost:
    """Загрузка картинок ассетами GitHub-релиза"""

    def __init__(
        self,
        ctx: ClientContext,
        use_latest_release: bool = False,
        release_id: Optional[int] = None,
        tag_prefix: str = "questions",
        api_base: str = GITHUB_API_BASE,
    ):
        """
        Args:
            ctx: контекст с HTTP-сессией, GITHUB_TOKEN и репозиторием
            use_latest_release: грузить в последний релиз
            release_id: грузить в конкретный релиз (приоритетнее latest)
            tag_prefix: префикс тега для нового релиза
            api_base: адрес GitHub API (подменяется в тестах)
        """
        if not ctx.github_repository:
            raise HostingError("GITHUB_REPOSITORY is not set")
        self.ctx = ctx
        self.use_latest_release = use_latest_release
        self.release_id = release_id
        self.tag_prefix = tag_prefix
        self.api_base = api_base.rstrip("/")
        self._release: Optional[dict] = None

    @property
    def _headers(self) -> dict:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.ctx.github_token:
            headers["Authorization"] = f"Bearer {self.ctx.github_token}"
        return headers

    def _repo_url(self, path: str) -> str:
        return f"{self.api_base}/repos/{self.ctx.github_repository}/{path}"

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        """HTTP-запрос к GitHub; любой не-2xx → HostingError"""
        headers = {**self._headers, **kwargs.pop("headers", {})}
        try:
            async with self.ctx.session.request(
                method,
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT),
                **kwargs
            ) as resp:
                if not 200 <= resp.status < 300:
                    error = await resp.text()
                    raise HostingError(f"GitHub {method} {url} failed: {resp.status} - {error}")
                return await resp.json(content_type=None)
        except asyncio.TimeoutError:
            raise HostingError(f"GitHub {method} {url}: request timeout")
        except aiohttp.ClientError as e:
            raise HostingError(f"GitHub {method} {url}: {e}")
        except ValueError as e:
            raise HostingError(f"GitHub {method} {url}: invalid JSON ({e})")

    async def create_release(self, tag: str, name: str = None) -> dict:
        """Создаёт релиз с тегом tag"""
        release = await self._request("POST", self._repo_url("releases"), json={
            "tag_name": tag,
            "name": name or tag,
            "body": "Rendered GMAT questions",
        })
        logger.info(f"📦 Создан релиз {tag} (id={release.get('id')})")
        return release

    async def get_latest_release(self) -> dict:
        return await self._request("GET", self._repo_url("releases/latest"))

    async def get_release(self, release_id: int) -> dict:
        return await self._request("GET", self._repo_url(f"releases/{release_id}"))

    async def resolve_release(self) -> dict:
        """Релиз для загрузки: по id → последний → новый. Кэшируется."""
        if self._release is not None:
            return self._release

        if self.release_id:
            release = await self.get_release(self.release_id)
        elif self.use_latest_release:
            release = await self.get_latest_release()
        else:
            stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
            release = await self.create_release(f"{self.tag_prefix}-{stamp}")

        if not release.get("upload_url"):
            raise HostingError(f"Release {release.get('id')} has no upload_url")
        self._release = release
        return release

    async def upload_asset(self, release: dict, path: Path, content_type: str = "image/png") -> str:
        """Загружает файл в релиз

        Returns:
            browser_download_url загруженного ассета
        """
        path = Path(path)
        upload_url = _URI_TEMPLATE_RE.sub("", release["upload_url"])
        name = f"{path.stem}_{uuid.uuid4().hex[:8]}{path.suffix}"

        try:
            data = path.read_bytes()
        except OSError as e:
            raise HostingError(f"Cannot read {path}: {e}")

        asset = await self._request(
            "POST",
            upload_url,
            params={"name": name},
            data=data,
            headers={"Content-Type": content_type},
        )
        url = asset.get("browser_download_url")
        if not url:
            raise HostingError(f"Upload of {name} returned no browser_download_url")
        logger.info(f"☁️ Картинка загружена: {url}")
        return url

    async def upload(self, path: Path) -> str:
        """Файл → публичный URL"""
        release = await self.resolve_release()
        return await self.upload_asset(release, path)

"""
Пайплайн доставки вопроса.

Стадии одной задачи (строго последовательно):
1. Fetching  — загрузка контента (повторы: 3 попытки с паузой 1 с)
2. Rendering — HTML → PNG через wkhtmltoimage
3. Hosting   — загрузка картинки на GitHub, локальный файл удаляется
4. Sending   — отправка каждому получателю независимо
5. Done / Failed

Ошибка одного получателя не мешает остальным; Fetching/Rendering/Hosting
при этом не перезапускаются.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from config import (
    get_logger,
    Category,
    DEFAULT_CAPTION,
    FETCH_MAX_ATTEMPTS,
    FETCH_RETRY_DELAY,
)
from config.features import flags
from core.errors import ApiError, RenderError, HostingError, TransportError
from core.models import QuestionContent, QuestionRef
from core.retry import RetryPolicy, NO_RETRY

logger = get_logger(__name__)


class JobStage(Enum):
    """Стадии задачи доставки"""
    FETCHING = "fetching"
    RENDERING = "rendering"
    HOSTING = "hosting"
    SENDING = "sending"
    DONE = "done"
    FAILED = "failed"


class Fetcher(Protocol):
    async def fetch_question(self, question_id: str) -> QuestionContent: ...


class Renderer(Protocol):
    async def render(self, content: QuestionContent, category: Category,
                     include_explanations: bool = False) -> Path: ...


class Hoster(Protocol):
    async def upload(self, path: Path) -> str: ...


class PhotoSender(Protocol):
    async def send_photo(self, chat_id: str, photo_url: str, caption: str = ""): ...


@dataclass
class DeliveryJob:
    """Рабочее состояние одной доставки"""
    recipients: List[str]
    ref: QuestionRef
    include_explanations: bool = False
    attempts: int = 0
    stage: JobStage = JobStage.FETCHING


@dataclass
class DeliveryOutcome:
    """Итог задачи доставки"""
    ref: QuestionRef
    stage: JobStage
    delivered: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    error: Optional[Exception] = None
    failed_stage: Optional[JobStage] = None
    attempts: int = 0
    photo_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Доставлено всем получателям"""
        return self.stage == JobStage.DONE and not self.failed

    @property
    def partial(self) -> bool:
        """Картинка отправлена, но не всем"""
        return self.stage == JobStage.DONE and bool(self.failed)


def default_fetch_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=FETCH_MAX_ATTEMPTS,
        delay=FETCH_RETRY_DELAY,
        retry_on=(TransportError, ApiError),
    )


def policy_from_flags(path: str, retry_on: tuple) -> RetryPolicy:
    """Политика повторов из features.yaml (по умолчанию — одна попытка)"""
    attempts = flags.get_int(path, 1)
    if attempts <= 1:
        return NO_RETRY
    return RetryPolicy(max_attempts=attempts, delay=FETCH_RETRY_DELAY, retry_on=retry_on)


def build_caption(prefix: str, content: QuestionContent, category: Category) -> str:
    caption = f"{prefix}\n\nQuestion ID: {content.id} ({category.display_name})"
    if content.src:
        caption += f"\nFrom: {content.src}"
    return caption


class DeliveryPipeline:
    """Fetching → Rendering → Hosting → Sending"""

    def __init__(
        self,
        fetcher: Fetcher,
        renderer: Renderer,
        hoster: Hoster,
        sender: PhotoSender,
        caption: str = DEFAULT_CAPTION,
        fetch_policy: Optional[RetryPolicy] = None,
        render_policy: Optional[RetryPolicy] = None,
        hosting_policy: Optional[RetryPolicy] = None,
        parallel_recipients: Optional[bool] = None,
    ):
        """
        Args:
            fetcher: источник контента (ContentClient)
            renderer: ImageRenderer
            hoster: GitHubReleaseHost
            sender: ZaloClient
            caption: префикс подписи к картинке
            fetch_policy: повторы Fetching (по умолчанию 3 × 1 с)
            render_policy: повторы Rendering (по умолчанию из features.yaml)
            hosting_policy: повторы Hosting (по умолчанию из features.yaml)
            parallel_recipients: рассылать параллельно (по умолчанию из features.yaml)
        """
        self.fetcher = fetcher
        self.renderer = renderer
        self.hoster = hoster
        self.sender = sender
        self.caption = caption
        self.fetch_policy = fetch_policy or default_fetch_policy()
        self.render_policy = render_policy or policy_from_flags(
            "pipeline.render_attempts", (RenderError,)
        )
        self.hosting_policy = hosting_policy or policy_from_flags(
            "pipeline.hosting_attempts", (HostingError,)
        )
        if parallel_recipients is None:
            parallel_recipients = flags.is_enabled("pipeline.parallel_recipients")
        self.parallel_recipients = parallel_recipients

    async def deliver_to_chat(self, chat_id: str, ref: QuestionRef,
                              include_explanations: bool = False) -> DeliveryOutcome:
        """Ответ в чат, который только что написал боту"""
        job = DeliveryJob(recipients=[chat_id], ref=ref, include_explanations=include_explanations)
        return await self.run(job)

    async def run(self, job: DeliveryJob) -> DeliveryOutcome:
        """Выполняет задачу до Done или Failed

        Returns:
            DeliveryOutcome — исключения стадий не выбрасываются наружу
        """
        ref = job.ref
        logger.info(
            f"🎯 Доставка вопроса {ref.question_id} ({ref.category.value}) "
            f"→ {len(job.recipients)} получателей"
        )

        def count_attempt(attempt: int) -> None:
            job.attempts = attempt

        try:
            job.stage = JobStage.FETCHING
            content = await self.fetch_policy.run(
                lambda: self.fetcher.fetch_question(ref.question_id),
                name=f"fetch {ref.question_id}",
                on_attempt=count_attempt,
            )

            job.stage = JobStage.RENDERING
            image_path = await self.render_policy.run(
                lambda: self.renderer.render(content, ref.category, job.include_explanations),
                name=f"render {ref.question_id}",
            )

            job.stage = JobStage.HOSTING
            photo_url = await self.hosting_policy.run(
                lambda: self.hoster.upload(image_path),
                name=f"upload {ref.question_id}",
            )
            _remove_file(image_path)
        except Exception as e:
            failed_stage = job.stage
            job.stage = JobStage.FAILED
            logger.error(f"❌ Вопрос {ref.question_id}: стадия {failed_stage.value} не удалась: {e}")
            return DeliveryOutcome(
                ref=ref,
                stage=JobStage.FAILED,
                error=e,
                failed_stage=failed_stage,
                attempts=job.attempts,
            )

        job.stage = JobStage.SENDING
        caption = build_caption(self.caption, content, ref.category)
        outcome = DeliveryOutcome(ref=ref, stage=JobStage.SENDING, attempts=job.attempts, photo_url=photo_url)

        if self.parallel_recipients:
            results = await asyncio.gather(
                *(self._send_one(chat_id, photo_url, caption) for chat_id in job.recipients)
            )
        else:
            results = [await self._send_one(chat_id, photo_url, caption) for chat_id in job.recipients]

        for chat_id, error in zip(job.recipients, results):
            if error is None:
                outcome.delivered.append(chat_id)
            else:
                outcome.failed[chat_id] = error

        job.stage = JobStage.DONE
        outcome.stage = JobStage.DONE
        if outcome.failed:
            logger.warning(
                f"⚠️ Вопрос {ref.question_id}: доставлено {len(outcome.delivered)}, "
                f"не доставлено {len(outcome.failed)}: {', '.join(outcome.failed)}"
            )
        else:
            logger.info(f"✅ Вопрос {ref.question_id} доставлен всем получателям")
        return outcome

    async def _send_one(self, chat_id: str, photo_url: str, caption: str) -> Optional[str]:
        """Отправка одному получателю; возвращает текст ошибки или None"""
        try:
            await self.sender.send_photo(chat_id, photo_url, caption)
            return None
        except Exception as e:
            logger.error(f"❌ Не удалось отправить в чат {chat_id}: {e}")
            return str(e)


def _remove_file(path: Path) -> None:
    try:
        Path(path).unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Не удалось удалить {path}: {e}")

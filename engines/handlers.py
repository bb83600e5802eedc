"""
Обработка одного входящего сообщения: команда → выбор вопроса → доставка.

Нераспознанный текст и неподдерживаемая категория — не ошибки: бот
отвечает справкой или извинением.
"""

from typing import Optional

from config import get_logger, Category, SUPPORTED_CATEGORIES
from core.catalog import QuestionCatalog
from core.commands import CommandType, parse_command
from core.errors import BotError, UnsupportedCategoryError
from core.models import InboundMessage, QuestionRef
from core.selector import select_questions
from locales import t

from .delivery import DeliveryPipeline, DeliveryOutcome

logger = get_logger(__name__)


class MessageHandler:
    """Роутинг команд пользователя"""

    def __init__(
        self,
        client,
        pipeline: DeliveryPipeline,
        catalog: QuestionCatalog,
        default_category: Optional[Category] = None,
    ):
        """
        Args:
            client: ZaloClient для текстовых ответов
            pipeline: пайплайн доставки картинок
            catalog: каталог вопросов
            default_category: фильтр для "random" (из --question-type)
        """
        self.client = client
        self.pipeline = pipeline
        self.catalog = catalog
        self.default_category = default_category

    async def __call__(self, message: InboundMessage) -> None:
        await self.handle(message)

    async def handle(self, message: InboundMessage) -> Optional[DeliveryOutcome]:
        """Обрабатывает сообщение

        Returns:
            DeliveryOutcome, если запускалась доставка
        """
        if message.sender_is_bot:
            return None

        command = parse_command(message.text)
        logger.info(
            f"💬 Сообщение от {message.sender_id} в чате {message.chat_id}: {command.type.value}"
        )

        if command.type == CommandType.SHOW_HELP:
            await self.reply(message.chat_id, self.help_text())
            return None

        if command.type == CommandType.REQUEST_BY_ID:
            return await self._deliver_by_id(message.chat_id, command.question_id)

        category = command.category if command.type == CommandType.REQUEST_BY_CATEGORY \
            else self.default_category
        return await self._deliver_random(message.chat_id, category)

    async def _deliver_random(self, chat_id: str, category: Optional[Category]) -> Optional[DeliveryOutcome]:
        result = select_questions(self.catalog, category, 1)
        if result.unsupported:
            await self.reply(chat_id, t('errors.unsupported', category=category.display_name))
            return None
        if not result.refs:
            name = category.display_name if category else "any category"
            await self.reply(chat_id, t('errors.empty', category=name))
            return None

        ref = result.refs[0]
        logger.info(f"🎯 Выбран вопрос {ref.question_id} ({ref.category.value})")
        outcome = await self.pipeline.deliver_to_chat(chat_id, ref, include_explanations=False)
        await self._report_failure(chat_id, outcome)
        return outcome

    async def _deliver_by_id(self, chat_id: str, question_id: str) -> Optional[DeliveryOutcome]:
        category = self.catalog.category_of(question_id)
        if category is None:
            await self.reply(chat_id, t('errors.not_found', question_id=question_id))
            return None
        if category not in SUPPORTED_CATEGORIES:
            error = UnsupportedCategoryError(category)
            logger.info(f"⚠️ {error}")
            await self.reply(chat_id, t('errors.unsupported', category=category.display_name))
            return None

        outcome = await self.pipeline.deliver_to_chat(
            chat_id, QuestionRef(category, question_id), include_explanations=True
        )
        await self._report_failure(chat_id, outcome)
        return outcome

    async def _report_failure(self, chat_id: str, outcome: DeliveryOutcome) -> None:
        # Если упала сама отправка картинки, текст тоже вряд ли дойдёт
        if outcome.failed_stage is not None:
            await self.reply(chat_id, t('errors.delivery_failed', question_id=outcome.ref.question_id))

    def help_text(self) -> str:
        categories = ", ".join(
            f"{c.value} ({c.display_name})" for c in SUPPORTED_CATEGORIES
        )
        return t('help', categories=categories, total=sum(
            self.catalog.count(c) for c in SUPPORTED_CATEGORIES
        ))

    async def reply(self, chat_id: str, text: str) -> None:
        try:
            await self.client.send_message(chat_id, text)
        except BotError as e:
            logger.error(f"❌ Не удалось ответить в чат {chat_id}: {e}")

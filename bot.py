"""
GMAT Zalo Bot — случайные вопросы GMAT картинками в Zalo.

Режимы:
    --show-stats        статистика базы вопросов
    --generate-images   отрендерить вопросы локально
    --send-zalo         разово разослать вопросы получателям
    --daily-at HH:MM    ежедневная рассылка по расписанию
    --bot-service       long polling: ответ на каждое сообщение

Примеры:
    python bot.py --bot-service --question-type ps
    python bot.py --question-type ps --count 3 --send-zalo --user-ids 123,456
    python bot.py --question-type ds --generate-images
    python bot.py --daily-at 08:00 --use-latest-release
"""

import argparse
import asyncio
import signal
import sys
from pathlib import Path
from typing import List, Optional

import aiohttp
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from config import (
    get_logger,
    BOT_TOKEN,
    GITHUB_TOKEN,
    GITHUB_REPOSITORY,
    USER_IDS,
    ConfigError,
    validate_env,
    parse_user_ids,
    Category,
    DEFAULT_CAPTION,
    DEFAULT_OUTPUT_DIR,
)
from config.features import flags
from clients import ClientContext, ZaloClient, ContentClient, GitHubReleaseHost, collect_recent_chat_ids
from core import BotError, QuestionCatalog, QuestionRef, select_questions
from engines import DeliveryPipeline, DeliveryJob, DeliveryOutcome, ImageRenderer, MessageHandler, UpdatePoller

logger = get_logger(__name__)


# ============= CLI =============

def parse_daily_at(value: str) -> tuple:
    """"08:00" → (8, 0)"""
    try:
        hour, minute = (int(part) for part in value.split(":"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"ожидается HH:MM, получено {value!r}")
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise argparse.ArgumentTypeError(f"некорректное время {value!r}")
    return hour, minute


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gmat-zalo-bot",
        description="GMAT Question Bot for Zalo - pick random questions and send them via Zalo Bot API",
    )
    parser.add_argument("-q", "--question-type", choices=[c.value.lower() for c in Category],
                        type=str.lower, help="Question type to filter by")
    parser.add_argument("-c", "--count", type=int, default=1, help="Number of questions to pick")
    parser.add_argument("--show-stats", action="store_true",
                        help="Show all available question types and counts")
    parser.add_argument("--generate-images", action="store_true",
                        help="Generate images for the questions")
    parser.add_argument("--output-dir", default=DEFAULT_OUTPUT_DIR,
                        help="Output directory for generated images")
    parser.add_argument("--send-zalo", action="store_true",
                        help="Send generated images via Zalo Bot API (one-time)")
    parser.add_argument("--bot-service", action="store_true",
                        help="Start bot service with continuous polling")
    parser.add_argument("--daily-at", type=parse_daily_at, metavar="HH:MM",
                        help="Send questions every day at this local time")
    parser.add_argument("--bot-token", help="Zalo Bot Token (or ZALO_BOT_TOKEN)")
    parser.add_argument("--caption", default=DEFAULT_CAPTION, help="Caption prefix for photos")
    parser.add_argument("--user-ids", default=USER_IDS,
                        help="Comma separated recipients for --send-zalo/--daily-at (or USER_IDS)")
    parser.add_argument("--use-latest-release", action="store_true",
                        help="Upload images to the latest GitHub release instead of a new one")
    parser.add_argument("--max-runtime", type=float, metavar="HOURS",
                        help="Stop the service after this many hours")
    return parser.parse_args(argv)


def selected_category(args: argparse.Namespace) -> Optional[Category]:
    return Category(args.question_type.upper()) if args.question_type else None


# ============= СБОРКА КОМПОНЕНТОВ =============

def build_pipeline(ctx: ClientContext, args: argparse.Namespace) -> DeliveryPipeline:
    host = GitHubReleaseHost(
        ctx,
        use_latest_release=args.use_latest_release or flags.is_enabled("hosting.use_latest_release"),
        release_id=flags.get("hosting.release_id"),
        tag_prefix=flags.get("hosting.release_tag_prefix", "questions"),
    )
    return DeliveryPipeline(
        fetcher=ContentClient(ctx),
        renderer=ImageRenderer(args.output_dir),
        hoster=host,
        sender=ZaloClient(ctx),
        caption=args.caption,
    )


def install_signal_handlers(shutdown: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown.set)
        except NotImplementedError:
            # Windows: остаётся KeyboardInterrupt
            logger.debug(f"Обработчик {sig.name} не поддерживается")


# ============= РЕЖИМЫ =============

async def generate_images(ctx: ClientContext, refs: List[QuestionRef], output_dir: str) -> List[Path]:
    """Рендерит вопросы локально без отправки"""
    content_client = ContentClient(ctx)
    renderer = ImageRenderer(output_dir)
    images = []
    for i, ref in enumerate(refs, 1):
        logger.info(f"{i}. Вопрос {ref.question_id} ({ref.category.display_name})")
        try:
            content = await content_client.fetch_question(ref.question_id)
            images.append(await renderer.render(content, ref.category, include_explanations=False))
        except BotError as e:
            logger.error(f"❌ Вопрос {ref.question_id}: {e}")
    return images


async def send_questions(pipeline: DeliveryPipeline, refs: List[QuestionRef],
                         recipients: List[str]) -> List[DeliveryOutcome]:
    """Каждый вопрос — одна задача доставки на всех получателей"""
    outcomes = []
    for ref in refs:
        outcomes.append(await pipeline.run(DeliveryJob(recipients=list(recipients), ref=ref)))
    return outcomes


async def resolve_recipients(args: argparse.Namespace, zalo: ZaloClient) -> List[str]:
    """Получатели из --user-ids/USER_IDS, иначе — чаты из последних сообщений"""
    recipients = parse_user_ids(args.user_ids)
    if recipients:
        return recipients
    logger.info("📱 Получатели не заданы, берём чаты из последних сообщений...")
    return await collect_recent_chat_ids(zalo)


async def run_once(args: argparse.Namespace, ctx: ClientContext, catalog: QuestionCatalog) -> int:
    refs = select_questions(catalog, selected_category(args), args.count).refs
    if not refs:
        logger.warning("⚠️ Нет вопросов по заданным критериям")
        return 0

    recipients = await resolve_recipients(args, ZaloClient(ctx))
    if not recipients:
        logger.warning("⚠️ Получателей нет. Напишите боту или задайте --user-ids")
        return 0

    outcomes = await send_questions(build_pipeline(ctx, args), refs, recipients)
    failed = [o for o in outcomes if not o.ok]
    logger.info(f"🎉 Рассылка завершена: {len(outcomes) - len(failed)}/{len(outcomes)} без ошибок")
    return 1 if failed else 0


async def run_daily(args: argparse.Namespace, ctx: ClientContext, catalog: QuestionCatalog,
                    shutdown: asyncio.Event) -> int:
    recipients = parse_user_ids(args.user_ids)
    if not recipients:
        raise ConfigError("Для --daily-at нужны получатели: --user-ids или USER_IDS")

    pipeline = build_pipeline(ctx, args)
    category = selected_category(args)

    async def daily_job():
        refs = select_questions(catalog, category, args.count).refs
        if not refs:
            logger.warning("⚠️ Нет вопросов для ежедневной рассылки")
            return
        await send_questions(pipeline, refs, recipients)

    hour, minute = args.daily_at
    scheduler = AsyncIOScheduler()
    scheduler.add_job(daily_job, CronTrigger(hour=hour, minute=minute), max_instances=1)
    scheduler.start()
    logger.info(f"⏰ Ежедневная рассылка в {hour:02d}:{minute:02d} для {len(recipients)} получателей")

    await shutdown.wait()
    scheduler.shutdown(wait=False)
    return 0


async def run_service(args: argparse.Namespace, ctx: ClientContext, catalog: QuestionCatalog,
                      shutdown: asyncio.Event) -> int:
    zalo = ZaloClient(ctx)
    handler = MessageHandler(zalo, build_pipeline(ctx, args), catalog, selected_category(args))
    await UpdatePoller(zalo, handler, shutdown).run()
    return 0


# ============= ЗАПУСК =============

async def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    needs_platform = args.send_zalo or args.bot_service or args.daily_at
    if needs_platform and not args.show_stats:
        try:
            validate_env(args.bot_token)
        except ConfigError as e:
            logger.error(f"❌ {e}")
            return 1

    async with aiohttp.ClientSession() as session:
        ctx = ClientContext(
            session=session,
            bot_token=args.bot_token or BOT_TOKEN or "",
            github_token=GITHUB_TOKEN,
            github_repository=GITHUB_REPOSITORY,
        )

        logger.info("📡 Загружаем базу GMAT...")
        try:
            catalog = await ContentClient(ctx).fetch_catalog()
        except BotError as e:
            logger.error(f"❌ Не удалось загрузить базу GMAT: {e}")
            return 1

        if args.show_stats:
            print(catalog.stats())
            return 0

        shutdown = asyncio.Event()
        install_signal_handlers(shutdown)
        if args.max_runtime:
            asyncio.get_running_loop().call_later(args.max_runtime * 3600, shutdown.set)

        try:
            if args.bot_service:
                logger.info("🚀 Бот запущен в режиме сервиса")
                return await run_service(args, ctx, catalog, shutdown)
            if args.daily_at:
                return await run_daily(args, ctx, catalog, shutdown)
            if args.send_zalo:
                return await run_once(args, ctx, catalog)
        except (ConfigError, BotError) as e:
            logger.error(f"❌ {e}")
            return 1

        result = select_questions(catalog, selected_category(args), args.count)
        if result.unsupported:
            logger.warning(f"⚠️ {result.error}")
            return 0
        for i, ref in enumerate(result.refs, 1):
            print(f"{i}. Question ID: {ref.question_id} ({ref.category.display_name})")

        if args.generate_images:
            for path in await generate_images(ctx, result.refs, args.output_dir):
                print(f"   📁 {path}")
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()

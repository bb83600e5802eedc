"""
Движки бота.

Содержит:
- render.py: ImageRenderer — вопрос → PNG через wkhtmltoimage
- delivery.py: DeliveryPipeline — fetch → render → host → send
- handlers.py: MessageHandler — команда пользователя → доставка
- poller.py: UpdatePoller — цикл long polling
"""

from .render import ImageRenderer, build_html, check_renderer
from .delivery import DeliveryPipeline, DeliveryJob, DeliveryOutcome, JobStage, build_caption
from .handlers import MessageHandler
from .poller import UpdatePoller

__all__ = [
    'ImageRenderer',
    'build_html',
    'check_renderer',
    'DeliveryPipeline',
    'DeliveryJob',
    'DeliveryOutcome',
    'JobStage',
    'build_caption',
    'MessageHandler',
    'UpdatePoller',
]

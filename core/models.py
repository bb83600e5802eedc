"""
Модели данных: вопросы и входящие сообщения платформы.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from config import Category

from .errors import NotFoundError


@dataclass(frozen=True)
class QuestionRef:
    """Ссылка на вопрос: категория + идентификатор"""
    category: Category
    question_id: str


@dataclass
class QuestionContent:
    """Полный контент вопроса из {id}.json"""
    id: str
    src: str
    question: str
    answers: List[str] = field(default_factory=list)
    explanations: List[str] = field(default_factory=list)
    type_tag: str = ""

    @classmethod
    def from_dict(cls, data: Any, question_id: str) -> "QuestionContent":
        """Разбирает запись вопроса

        Args:
            data: распарсенный JSON
            question_id: запрошенный идентификатор (для сообщения об ошибке)

        Raises:
            NotFoundError: если запись другого формата (например, RC)
        """
        if not isinstance(data, dict) or not isinstance(data.get("question"), str):
            raise NotFoundError(question_id, "unsupported content format")

        answers = data.get("answers") or []
        explanations = data.get("explanations") or []
        if not isinstance(answers, list) or not isinstance(explanations, list):
            raise NotFoundError(question_id, "unsupported content format")

        return cls(
            id=str(data.get("id", question_id)),
            src=str(data.get("src", "")),
            question=data["question"],
            answers=[str(a) for a in answers],
            explanations=[str(e) for e in explanations],
            type_tag=str(data.get("type", "")),
        )


@dataclass(frozen=True)
class InboundMessage:
    """Входящее сообщение из getUpdates"""
    sender_id: str
    chat_id: str
    message_id: str
    date: int = 0
    text: Optional[str] = None
    photo_url: Optional[str] = None
    caption: Optional[str] = None
    chat_type: str = ""
    sender_is_bot: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> Optional["InboundMessage"]:
        """Собирает сообщение из JSON платформы; None если нет чата"""
        if not isinstance(data, dict):
            return None

        sender = data.get("from") or data.get("sender")
        chat = data.get("chat")
        if not isinstance(sender, dict):
            sender = {}
        if not isinstance(chat, dict):
            return None
        chat_id = chat.get("id")
        if chat_id is None:
            return None

        return cls(
            sender_id=str(sender.get("id", "")),
            chat_id=str(chat_id),
            message_id=str(data.get("message_id", "")),
            date=_to_int(data.get("date")),
            text=data.get("text"),
            photo_url=data.get("photo_url") or data.get("photo"),
            caption=data.get("caption"),
            chat_type=str(chat.get("chat_type", "")),
            sender_is_bot=bool(sender.get("is_bot", False)),
        )


@dataclass(frozen=True)
class Update:
    """Событие из getUpdates"""
    event_name: str
    message: Optional[InboundMessage] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Update":
        return cls(
            event_name=str(data.get("event_name", "")),
            message=InboundMessage.from_dict(data.get("message")),
        )


def _to_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0

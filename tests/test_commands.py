"""
Тест разбора команд без зависимостей от сети.
"""

from config import Category, COMMAND_WORDS
from core.commands import Command, CommandType, parse_command


def test_category_keywords_case_insensitive():
    """PS в любом регистре и с пробелами — одна и та же команда"""
    expected = Command(CommandType.REQUEST_BY_CATEGORY, category=Category.PS)
    for text in ("PS", "ps", " Ps ", "\tpS\n"):
        assert parse_command(text) == expected, f"Не распознано: {text!r}"


def test_full_category_names():
    assert parse_command("Problem Solving").category == Category.PS
    assert parse_command("data   sufficiency").category == Category.DS
    assert parse_command("CRITICAL REASONING").category == Category.CR


def test_number_is_request_by_id():
    command = parse_command("42")
    assert command.type == CommandType.REQUEST_BY_ID
    assert command.question_id == "42"
    assert parse_command(" 7 ").question_id == "7"


def test_number_has_priority_over_keywords(monkeypatch):
    monkeypatch.setitem(COMMAND_WORDS, "42", "PS")
    assert parse_command("42").type == CommandType.REQUEST_BY_ID


def test_unmatched_text_shows_help():
    for text in ("", "   ", "xyz", "hello there", "-1", "4 2", "١٢", None):
        assert parse_command(text).type == CommandType.SHOW_HELP, f"Ожидалась справка для {text!r}"


def test_random_and_help_words():
    assert parse_command("random").type == CommandType.REQUEST_RANDOM
    assert parse_command("/next").type == CommandType.REQUEST_RANDOM
    assert parse_command("/help").type == CommandType.SHOW_HELP
    assert parse_command("start").type == CommandType.SHOW_HELP


def test_excluded_category_is_still_parsed():
    """RC распознаётся как категория — отказ даёт уже выборка"""
    command = parse_command("rc")
    assert command.type == CommandType.REQUEST_BY_CATEGORY
    assert command.category == Category.RC

"""
Тест сборки HTML и вызова внешнего рендерера.
"""

import asyncio
import stat
import sys

import pytest

from config import Category
from core.errors import RenderError
from core.models import QuestionContent
from engines.render import ImageRenderer, answer_label, build_html, check_renderer


CONTENT = QuestionContent(
    id="42",
    src="https://gmatclub.com/forum/42.html",
    question="<p>If $x + 1 = 3$, what is x?</p>",
    answers=["1", "2", "3", "4", "5", "6"],
    explanations=["<p>Subtract one.</p>", "<p>Plug in.</p>"],
)


def test_answer_labels():
    assert [answer_label(i) for i in range(6)] == ["A", "B", "C", "D", "E", "6"]


def test_build_html_without_explanations():
    html = build_html(CONTENT, Category.PS)
    assert "Question ID: 42" in html
    assert "Problem Solving" in html
    assert "<strong>A)</strong> 1" in html
    assert "<strong>6)</strong> 6" in html
    assert "If $x + 1 = 3$" in html
    assert "Explanation 1" not in html
    assert 'href="https://gmatclub.com/forum/42.html"' in html
    assert "width: 100%;" in html


def test_build_html_with_explanations():
    html = build_html(CONTENT, Category.PS, include_explanations=True)
    assert "Explanation 1:" in html
    assert "Explanation 2:" in html


def test_renderer_command():
    renderer = ImageRenderer("out")
    cmd = renderer.command("in.html", "out.png")
    assert cmd[:6] == ["wkhtmltoimage", "--width", "1200", "--disable-smart-width", "--quality", "100"]
    assert cmd[-2:] == ["in.html", "out.png"]


def test_missing_binary():
    with pytest.raises(RenderError):
        check_renderer("definitely-not-installed-renderer")


@pytest.mark.skipif(sys.platform == "win32", reason="shell script renderer")
def test_nonzero_exit_is_render_error(tmp_path):
    script = tmp_path / "bad-renderer"
    script.write_text("#!/bin/sh\necho 'Exit with code 1 due to network error' >&2\nexit 1\n")
    script.chmod(script.stat().st_mode | stat.S_IEXEC)

    renderer = ImageRenderer(str(tmp_path / "out"), binary=str(script))
    with pytest.raises(RenderError) as exc_info:
        asyncio.run(renderer.render(CONTENT, Category.PS))
    assert "network error" in exc_info.value.stderr


@pytest.mark.skipif(sys.platform == "win32", reason="shell script renderer")
def test_successful_render(tmp_path):
    script = tmp_path / "fake-renderer"
    script.write_text('#!/bin/sh\nfor last; do :; done\nprintf png > "$last"\n')
    script.chmod(script.stat().st_mode | stat.S_IEXEC)

    renderer = ImageRenderer(str(tmp_path / "out"), binary=str(script))
    path = asyncio.run(renderer.render(CONTENT, Category.PS))
    assert path == tmp_path / "out" / "question_42.png"
    assert path.read_bytes() == b"png"

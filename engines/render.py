"""
Рендеринг вопроса в картинку.

HTML страницы собирается из контента вопроса, затем внешний
wkhtmltoimage превращает его в PNG. Ненулевой код выхода — RenderError,
повторов здесь нет (решает политика пайплайна).
"""

import asyncio
import shutil
import tempfile
from pathlib import Path
from typing import List

from config import (
    get_logger,
    Category,
    RENDERER_BINARY,
    RENDER_WIDTH,
    RENDER_QUALITY,
    RENDER_FORMAT,
    HEADER_COLOR,
)
from core.errors import RenderError
from core.models import QuestionContent

logger = get_logger(__name__)

ANSWER_LABELS = "ABCDE"

MATHJAX = r"""
    <script>
        window.MathJax = {
            tex: {
                inlineMath: [['\\(', '\\)'], ['$', '$']],
                displayMath: [['\\[', '\\]'], ['$$', '$$']]
            },
            options: {
                processHtmlClass: 'tex2jax_process',
                processEscapes: true
            }
        };
    </script>
    <script id="MathJax-script" async src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"></script>
"""

STYLE = """
    <style>
        body {
            font-family: Georgia, 'Times New Roman', Times, serif;
            max-width: 1000px;
            margin: 0 auto;
            padding: 30px;
            line-height: 1.6;
            background-color: #ffffff;
            color: #333;
        }
        .question-header {
            background: %(color)s;
            color: white;
            padding: 25px;
            border-radius: 8px;
            margin-bottom: 30px;
        }
        .question-id { font-size: 1.1em; font-weight: 600; opacity: 0.9; margin-bottom: 5px; }
        .question-type { font-size: 1.8em; font-weight: 700; margin: 0; }
        .question-content { background: white; padding: 30px; margin-bottom: 25px; }
        .question-text { font-size: 1.2em; line-height: 1.7; margin-bottom: 25px; color: #2c3e50; }
        .answers-section, .explanations-section { padding: 25px; margin-bottom: 25px; }
        .answers-section { background: #f9f9f9; }
        .answers-section h3, .explanations-section h3, .explanation h4 { color: %(color)s; margin-top: 0; }
        .answer-option { padding: 12px 15px; margin: 8px 0; background: white; font-size: 1.1em; }
        .explanation { margin-bottom: 25px; padding: 20px; background: #f9f9f9; }
        .source-link { margin-top: 30px; padding: 15px; background: #f9f9f9; font-size: 0.9em; }
        .source-link a { color: %(color)s; text-decoration: none; }
        table { border-collapse: collapse; width: 100%%; margin: 15px 0; }
        th, td { padding: 12px; text-align: left; border-bottom: 1px solid #eee; }
        th { background-color: #f9f9f9; font-weight: bold; }
        ul, ol { padding-left: 25px; }
        li { margin: 8px 0; }
        code { background-color: #f9f9f9; padding: 2px 6px; font-family: 'Courier New', monospace; }
    </style>
"""


def answer_label(index: int) -> str:
    """A–E для первых пяти вариантов, дальше — номер"""
    return ANSWER_LABELS[index] if index < len(ANSWER_LABELS) else str(index + 1)


def _answers_html(answers: List[str]) -> str:
    if not answers:
        return ""
    options = "\n".join(
        f'<div class="answer-option"><strong>{answer_label(i)})</strong> {answer}</div>'
        for i, answer in enumerate(answers)
    )
    return f'<div class="answers-section"><h3>Answer Choices:</h3>\n{options}\n</div>'


def _explanations_html(explanations: List[str]) -> str:
    if not explanations:
        return ""
    items = "\n".join(
        f'<div class="explanation"><h4>Explanation {i + 1}:</h4>{text}</div>'
        for i, text in enumerate(explanations)
    )
    return f'<div class="explanations-section"><h3>Explanations:</h3>\n{items}\n</div>'


def build_html(content: QuestionContent, category: Category, include_explanations: bool = False) -> str:
    """Собирает HTML-страницу вопроса

    Тексты вопроса и вариантов — уже HTML из базы, вставляются как есть.
    """
    explanations = _explanations_html(content.explanations) if include_explanations else ""
    style = STYLE % {"color": HEADER_COLOR}
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>GMAT Question {content.id}</title>
{MATHJAX}
{style}
</head>
<body>
    <div class="question-header">
        <div class="question-id">Question ID: {content.id}</div>
        <h1 class="question-type">{category.display_name}</h1>
    </div>
    <div class="question-content">
        <div class="question-text tex2jax_process">
            {content.question}
        </div>
        {_answers_html(content.answers)}
        {explanations}
    </div>
    <div class="source-link">
        <strong>Source:</strong> <a href="{content.src}" target="_blank">{content.src}</a>
    </div>
</body>
</html>
"""


def check_renderer(binary: str = RENDERER_BINARY) -> str:
    """Путь к wkhtmltoimage или RenderError, если его нет"""
    path = shutil.which(binary)
    if not path:
        raise RenderError(
            f"{binary} is not installed or not in PATH. "
            f"Please install it first: https://wkhtmltopdf.org/downloads.html"
        )
    return path


class ImageRenderer:
    """Рендерер вопросов через wkhtmltoimage"""

    def __init__(self, output_dir: str, binary: str = RENDERER_BINARY,
                 width: int = RENDER_WIDTH, quality: int = RENDER_QUALITY):
        self.output_dir = Path(output_dir)
        self.binary = binary
        self.width = width
        self.quality = quality

    def command(self, html_path: Path, output_path: Path) -> List[str]:
        return [
            self.binary,
            "--width", str(self.width),
            "--disable-smart-width",
            "--quality", str(self.quality),
            "--format", RENDER_FORMAT,
            str(html_path),
            str(output_path),
        ]

    async def render(self, content: QuestionContent, category: Category,
                     include_explanations: bool = False) -> Path:
        """Рендерит вопрос в PNG

        Returns:
            Путь к картинке в output_dir

        Raises:
            RenderError: нет рендерера или он завершился с ошибкой
        """
        check_renderer(self.binary)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / f"question_{content.id}.{RENDER_FORMAT}"

        logger.info(f"🖼️ Рендерим вопрос {content.id}...")
        with tempfile.TemporaryDirectory() as tmp:
            html_path = Path(tmp) / "question.html"
            html_path.write_text(build_html(content, category, include_explanations), encoding="utf-8")

            try:
                proc = await asyncio.create_subprocess_exec(
                    *self.command(html_path, output_path),
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as e:
                raise RenderError(f"{self.binary} could not be started: {e}")
            _, stderr = await proc.communicate()

        if proc.returncode != 0:
            stderr_text = stderr.decode("utf-8", errors="replace")
            raise RenderError(
                f"{self.binary} failed with exit code {proc.returncode}: {stderr_text[-2000:]}",
                stderr=stderr_text,
            )

        logger.info(f"✅ Картинка сохранена: {output_path}")
        return output_path

"""Dialogue example store and topic section store."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..errors import ConfigurationError
from .embeddings import Embedder, SemanticIndex
from .text import overlap_score

logger = logging.getLogger(__name__)

_QUESTION_PREFIX = "Вопрос:"
_ANSWER_PREFIX = "Ответ:"
_SECTION_TITLE_RE = re.compile(r"^\[(?P<key>[a-z_]+)\]\s*$")


@dataclass(frozen=True)
class DialogExample:
    """One curated question/answer pair from managers' dialogues."""

    question: str
    answer: str


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read knowledge file {path}: {e}") from e


class DialogExampleStore:
    """Ready-made answers, consulted before the topic sections.

    With an embedder, questions are matched by embedding similarity;
    without one, by stem overlap.

    Args:
        examples: Parsed question/answer pairs
        min_score: Minimum stem overlap for a keyword match
        embedder: Batch text embedder enabling semantic search
        min_similarity: Minimum cosine similarity for a semantic match
    """

    def __init__(
        self,
        examples: list[DialogExample],
        min_score: float = 0.5,
        embedder: Optional[Embedder] = None,
        min_similarity: float = 0.6,
    ) -> None:
        self._examples = examples
        self._min_score = min_score
        self._min_similarity = min_similarity
        self._index = (
            SemanticIndex(embedder, [e.question for e in examples]) if embedder else None
        )

    @classmethod
    def from_file(cls, path: Path, **kwargs: Any) -> "DialogExampleStore":
        return cls(cls.parse(_read(path)), **kwargs)

    @staticmethod
    def parse(text: str) -> list[DialogExample]:
        """Parse ``Вопрос:``/``Ответ:`` blocks; an answer runs until the next question."""
        examples: list[DialogExample] = []
        question: Optional[str] = None
        answer_lines: list[str] = []
        in_answer = False

        def flush() -> None:
            if question and answer_lines:
                examples.append(DialogExample(question, "\n".join(answer_lines).strip()))

        for line in text.splitlines():
            stripped = line.strip()
            if stripped.startswith(_QUESTION_PREFIX):
                flush()
                question = stripped[len(_QUESTION_PREFIX):].strip()
                answer_lines = []
                in_answer = False
            elif stripped.startswith(_ANSWER_PREFIX):
                in_answer = True
                answer_lines.append(stripped[len(_ANSWER_PREFIX):].strip())
            elif in_answer:
                answer_lines.append(line.rstrip())
        flush()
        return examples

    def __len__(self) -> int:
        return len(self._examples)

    @property
    def semantic(self) -> bool:
        return self._index is not None

    async def search(self, query: str, limit: int = 3) -> list[DialogExample]:
        """Best matching examples, highest score first."""
        if self._index is not None:
            scores = await self._index.scores(query)
            threshold = self._min_similarity
        else:
            scores = [overlap_score(query, example.question) for example in self._examples]
            threshold = self._min_score
        matches = [
            (score, index) for index, score in enumerate(scores) if score >= threshold
        ]
        matches.sort(key=lambda item: (-item[0], item[1]))
        return [self._examples[index] for _, index in matches[:limit]]


class TopicSectionStore:
    """Information sections keyed by intent category, returned verbatim."""

    def __init__(self, sections: dict[str, str]) -> None:
        self._sections = sections

    @classmethod
    def from_file(cls, path: Path) -> "TopicSectionStore":
        return cls(cls.parse(_read(path)))

    @staticmethod
    def parse(text: str) -> dict[str, str]:
        """Split on ``[category_key]`` title lines."""
        sections: dict[str, list[str]] = {}
        current: Optional[str] = None
        for line in text.splitlines():
            match = _SECTION_TITLE_RE.match(line.strip())
            if match:
                current = match.group("key")
                sections[current] = []
            elif current is not None:
                sections[current].append(line)
        return {key: "\n".join(lines).strip() for key, lines in sections.items() if "".join(lines).strip()}

    def get(self, category: str) -> Optional[str]:
        return self._sections.get(category)

    def keys(self) -> list[str]:
        return list(self._sections)

"""
Knowledge Source Module

Loads the support corpus and segments it into retrievable sentences.

The corpus is a plain text file (one fact per line) or a directory of
.txt/.md files. Nothing is cached: every load re-reads the store so edits
to the FAQ are picked up on the next query.

Read failures never raise. They are returned alongside whatever could be
loaded so that retrieval degrades to fewer (or zero) facts instead of
aborting the request.

Usage:
    source = TextKnowledgeSource("data/faq.txt")
    loaded = source.load()
    for unit in loaded.units:
        print(unit.source, unit.text)
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Union

from customerbot.config import settings
from customerbot.errors import CorpusUnavailable
from customerbot.logger import get_logger

logger = get_logger(__name__)

_LINE_BREAKS = re.compile(r"(?:\r?\n)+")


@dataclass(frozen=True)
class KnowledgeUnit:
    """
    A single retrievable sentence.

    Attributes:
        text: Trimmed, non-empty line from the corpus
        source: Document the line came from
        line: Position of the unit within its document
    """
    text: str
    source: str
    line: int = 0


@dataclass
class KnowledgeLoad:
    """
    Result of loading the corpus.

    Attributes:
        units: Units in corpus order
        errors: Read failures encountered while loading
    """
    units: List[KnowledgeUnit] = field(default_factory=list)
    errors: List[CorpusUnavailable] = field(default_factory=list)

    def __iter__(self) -> Iterator[KnowledgeUnit]:
        return iter(self.units)

    def __len__(self) -> int:
        return len(self.units)

    @property
    def ok(self) -> bool:
        """True when every document was read."""
        return not self.errors


def segment_text(text: str) -> List[str]:
    """
    Split document content into sentences.

    Splits on runs of line breaks, trims each piece and drops empty ones.
    """
    return [piece.strip() for piece in _LINE_BREAKS.split(text) if piece.strip()]


class KnowledgeSource(ABC):
    """Abstract corpus store."""

    @abstractmethod
    def load(self) -> KnowledgeLoad:
        """Load the corpus. Must not raise on read failures."""
        pass


class TextKnowledgeSource(KnowledgeSource):
    """
    Corpus backed by a text file or a directory of text files.

    Directory contents are read in file-name order so corpus order, and
    therefore tie-breaking between equally relevant facts, is stable.
    """

    SUPPORTED_EXTENSIONS = {".txt", ".md"}

    def __init__(self, path: Union[str, Path, None] = None):
        """
        Args:
            path: File or directory (defaults to settings)
        """
        self.path = Path(path) if path is not None else settings.knowledge.location

    def _documents(self) -> List[Path]:
        if self.path.is_dir():
            return sorted(
                p for p in self.path.iterdir()
                if p.is_file() and p.suffix.lower() in self.SUPPORTED_EXTENSIONS
            )
        return [self.path]

    def _load_document(self, path: Path) -> List[KnowledgeUnit]:
        text = path.read_text(encoding="utf-8")
        return [
            KnowledgeUnit(text=sentence, source=path.name, line=i)
            for i, sentence in enumerate(segment_text(text))
        ]

    def load(self) -> KnowledgeLoad:
        """
        Read and segment every document.

        Returns:
            KnowledgeLoad with the units that could be read and one
            CorpusUnavailable per unreadable document
        """
        result = KnowledgeLoad()

        try:
            documents = self._documents()
        except OSError as e:
            error = CorpusUnavailable(str(self.path), str(e))
            logger.warning(str(error))
            result.errors.append(error)
            return result

        for document in documents:
            try:
                result.units.extend(self._load_document(document))
            except (OSError, UnicodeDecodeError) as e:
                error = CorpusUnavailable(str(document), str(e))
                logger.warning(str(error))
                result.errors.append(error)

        logger.debug(f"Loaded {len(result.units)} knowledge units from {self.path}")
        return result

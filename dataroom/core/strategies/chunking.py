"""Sentence-aware text chunking."""
import re
from dataclasses import dataclass

_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")


@dataclass(frozen=True)
class ChunkingConfig:
    """Chunk size policy, in characters."""
    max_chunk_size: int
    overlap_size: int
    min_chunk_size: int

    def __post_init__(self):
        if self.max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be positive")
        if self.overlap_size < 0 or self.min_chunk_size < 0:
            raise ValueError("overlap_size and min_chunk_size must not be negative")
        if self.min_chunk_size > self.max_chunk_size:
            raise ValueError("min_chunk_size must not exceed max_chunk_size")

    @property
    def overlap_words(self) -> int:
        """Approximate number of words carried into the next chunk."""
        return self.overlap_size // 10


DEFAULT_CHUNKING_CONFIG = ChunkingConfig(
    max_chunk_size=500, overlap_size=50, min_chunk_size=100
)
INDEXING_CHUNKING_CONFIG = ChunkingConfig(
    max_chunk_size=300, overlap_size=20, min_chunk_size=50
)


def split_sentences(text: str) -> list[str]:
    """Split text on terminal punctuation; no match yields the whole text.

    Text after the last terminal mark is kept as a final sentence.
    """
    sentences = []
    end = 0
    for match in _SENTENCE_RE.finditer(text):
        sentences.append(match.group())
        end = match.end()

    if not sentences:
        return [text]

    tail = text[end:]
    if tail.strip():
        sentences.append(tail)
    return sentences


def _overlap_tail(chunk: str, words: int) -> str:
    if words <= 0:
        return ""
    return " ".join(chunk.split(" ")[-words:])


def chunk_text(
    content: str, config: ChunkingConfig = DEFAULT_CHUNKING_CONFIG
) -> list[str]:
    """Split text into chunks preserving sentences.

    Sentences are accumulated greedily up to ``max_chunk_size``. A chunk
    shorter than ``min_chunk_size`` keeps absorbing sentences past the
    limit instead of being emitted. Each new chunk starts with the last
    few words of the previous one. A short trailing remainder is appended
    to the last chunk so no text is dropped.

    Args:
        content: Raw document text.
        config: Chunk size policy.

    Returns:
        List of chunks; ``[content]`` if no chunk could be formed.
    """
    chunks: list[str] = []
    current = ""

    for sentence in split_sentences(content):
        sentence = sentence.strip()
        if not sentence:
            continue

        if len(current) + len(sentence) <= config.max_chunk_size:
            current = f"{current} {sentence}" if current else sentence
        elif len(current) >= config.min_chunk_size:
            chunks.append(current)
            overlap = _overlap_tail(current, config.overlap_words)
            current = f"{overlap} {sentence}" if overlap else sentence
        else:
            current = f"{current} {sentence}" if current else sentence

    if current and len(current) >= config.min_chunk_size:
        chunks.append(current)
    elif chunks and current:
        chunks[-1] += " " + current

    return chunks or [content]

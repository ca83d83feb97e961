from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Sequence

SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


@dataclass(slots=True, frozen=True)
class Chunk:
    text: str
    paragraph_index: int
    order: int


def segment(text: str, max_chunk_length: int) -> List[Chunk]:
    """Split ``text`` into ordered chunks no longer than ``max_chunk_length``.

    Paragraphs (split on newline) are kept whole when they fit. Longer
    paragraphs are packed sentence by sentence, and a sentence that alone
    exceeds the limit is sliced at fixed character offsets, which may cut a
    word in two. Chunks keep their surrounding whitespace, so joining the
    chunks of a paragraph in order gives the paragraph back.
    """
    if max_chunk_length <= 0:
        raise ValueError("max_chunk_length must be positive")

    chunks: List[Chunk] = []
    for paragraph_index, paragraph in enumerate(text.split("\n")):
        for piece in _split_paragraph(paragraph, max_chunk_length):
            chunks.append(Chunk(text=piece, paragraph_index=paragraph_index, order=len(chunks)))
    return chunks


def reassemble(chunks: Sequence[Chunk], texts: Sequence[str]) -> str:
    """Join ``texts`` (one per chunk) back into paragraphs by chunk order."""
    if len(chunks) != len(texts):
        raise ValueError(f"Expected {len(chunks)} texts, got {len(texts)}")
    paragraphs: Dict[int, List[str]] = {}
    for chunk, value in sorted(zip(chunks, texts), key=lambda pair: pair[0].order):
        paragraphs.setdefault(chunk.paragraph_index, []).append(value)
    return "\n".join("".join(paragraphs[index]) for index in sorted(paragraphs))


def _split_paragraph(paragraph: str, limit: int) -> List[str]:
    if len(paragraph) <= limit:
        return [paragraph]

    pieces: List[str] = []
    current = ""
    for sentence in _split_sentences(paragraph):
        if len(sentence) > limit:
            if current:
                pieces.append(current)
                current = ""
            pieces.extend(_hard_slice(sentence, limit))
        elif len(current) + len(sentence) > limit:
            pieces.append(current)
            current = sentence
        else:
            current += sentence
    if current:
        pieces.append(current)
    return pieces


def _split_sentences(paragraph: str) -> List[str]:
    # Trailing whitespace stays with the sentence it follows
    sentences: List[str] = []
    start = 0
    for match in SENTENCE_BOUNDARY.finditer(paragraph):
        sentences.append(paragraph[start:match.end()])
        start = match.end()
    if start < len(paragraph):
        sentences.append(paragraph[start:])
    return sentences


def _hard_slice(sentence: str, limit: int) -> List[str]:
    return [sentence[i:i + limit] for i in range(0, len(sentence), limit)]

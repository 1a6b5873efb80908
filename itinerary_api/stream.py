"""
Incremental classification of a streamed generator answer.

``StreamClassifier`` consumes fragments one at a time and narrates the
reasoning section as ``DebugLog`` records. ``extract_result`` splits the
finished text into its reasoning and result parts.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .errors import EncodingError
from .prompts import REASONING_MARKER, RESULT_MARKER
from .schemas import DebugLog


SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
SENTENCE_TRIGGER = re.compile(r"[.!?\n]")
MIN_SENTENCE_LENGTH = 10
SUMMARY_LENGTH = 200


class Phase(str, Enum):
    BEFORE_REASONING = "before_reasoning"
    IN_REASONING = "in_reasoning"
    AFTER_REASONING = "after_reasoning"


class StreamClassifier:
    def __init__(self) -> None:
        self.phase = Phase.BEFORE_REASONING
        self.accumulated_text = ""
        self.pending_buffer = ""

    @property
    def in_reasoning(self) -> bool:
        return self.phase is Phase.IN_REASONING

    def feed(self, fragment: str) -> List[DebugLog]:
        """Consume one fragment and return the notifications it triggers, in order."""
        notes: List[DebugLog] = []
        self.accumulated_text += fragment
        if self.phase is Phase.AFTER_REASONING:
            return notes
        self.pending_buffer += fragment

        if self.phase is Phase.BEFORE_REASONING:
            if REASONING_MARKER in self.pending_buffer:
                self.phase = Phase.IN_REASONING
                self.pending_buffer = ""
                notes.append(DebugLog(level="info", message="AI started reasoning process..."))
            return notes

        if self.phase is Phase.IN_REASONING:
            if RESULT_MARKER in self.pending_buffer:
                self.phase = Phase.AFTER_REASONING
                self.pending_buffer = ""
                notes.append(
                    DebugLog(level="success", message="AI completed reasoning, generating itinerary...")
                )
            elif fragment.strip() and SENTENCE_TRIGGER.search(fragment):
                notes.extend(self._drain_sentences())

        return notes

    def _drain_sentences(self) -> List[DebugLog]:
        *complete, tail = SENTENCE_BOUNDARY.split(self.pending_buffer)
        self.pending_buffer = tail
        notes = []
        for sentence in complete:
            sentence = sentence.strip()
            if len(sentence) > MIN_SENTENCE_LENGTH:
                notes.append(DebugLog(level="info", message=f"AI: {sentence}"))
        return notes


@dataclass(frozen=True)
class ExtractedResult:
    reasoning: str
    result: str

    def summary(self) -> Optional[DebugLog]:
        if not self.reasoning:
            return None
        return DebugLog(
            level="success",
            message=f"AI reasoning summary: {self.reasoning[:SUMMARY_LENGTH]}...",
        )


def split_sections(text: str) -> ExtractedResult:
    if RESULT_MARKER not in text:
        raise EncodingError(f"{RESULT_MARKER!r} marker not found in generated text")
    before, _, after = text.partition(RESULT_MARKER)
    reasoning = before.replace(REASONING_MARKER, "", 1).strip()
    return ExtractedResult(reasoning=reasoning, result=after.strip())


def extract_result(text: str) -> ExtractedResult:
    """Split generated text on the first RESULT: marker.

    Text without the marker is returned whole as the result.
    """
    try:
        return split_sections(text)
    except EncodingError:
        return ExtractedResult(reasoning="", result=text)

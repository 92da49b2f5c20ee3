"""Answer data models returned by the chat orchestrator."""
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class SourceReference:
    """A retrieved chunk cited in an answer."""
    source_id: str
    similarity: float
    preview: str


@dataclass(frozen=True)
class AnswerResult:
    """Result of a single query-response cycle."""
    answer_text: str
    sources: List[SourceReference]
    using_knowledgebase: bool
    model: str

"""Document data models."""
from dataclasses import dataclass


@dataclass
class Document:
    """Represents a loaded markdown document."""
    filename: str
    content: str

    @property
    def char_count(self) -> int:
        return len(self.content)

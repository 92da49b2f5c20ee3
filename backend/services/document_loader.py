"""Document loading service for markdown knowledgebases."""
import logging
from pathlib import Path
from typing import List

from models.document import Document
from services.errors import InvalidInputError
from config import KNOWLEDGEBASE_DIR

logger = logging.getLogger(__name__)


class DocumentLoader:
    """Loads markdown files from a knowledgebase directory."""

    def __init__(self, docs_directory: str = KNOWLEDGEBASE_DIR, pattern: str = "*.md"):
        """
        Initialize DocumentLoader.

        Args:
            docs_directory: Path to directory containing markdown files
            pattern: Glob pattern selecting files (non-recursive)
        """
        self.docs_directory = Path(docs_directory)
        self.pattern = pattern

    def load_documents(self) -> List[Document]:
        """
        Load all matching files from the documents directory.

        Returns:
            Documents sorted by filename

        Raises:
            InvalidInputError: If the directory does not exist
        """
        if not self.docs_directory.is_dir():
            logger.error(f"Knowledgebase directory not found: {self.docs_directory}")
            raise InvalidInputError(
                f"Knowledgebase directory not found: {self.docs_directory}",
                details={"path": str(self.docs_directory)}
            )

        paths = sorted(p for p in self.docs_directory.glob(self.pattern) if p.is_file())
        logger.info(f"Found {len(paths)} markdown file(s) in {self.docs_directory}")

        documents = []
        for path in paths:
            # Universal newlines turn CRLF paragraph breaks into "\n\n"
            content = path.read_text(encoding="utf-8")
            document = Document(filename=path.name, content=content)
            documents.append(document)
            logger.debug(f"Loaded {document.filename}: {document.char_count} characters")

        return documents

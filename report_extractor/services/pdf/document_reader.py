"""Page-ordered text extraction from PDF reports using pdfplumber."""

import asyncio
import hashlib
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import List, Union

import pdfplumber

from report_extractor.core.exceptions import DocumentReadError
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class DocumentContent:
    """Text and identity of a source document."""
    content_hash: str
    page_count: int
    pages: List[str] = field(default_factory=list)
    filename: str = ""


class DocumentReader:
    """Reads a PDF into per-page text plus a SHA-256 content hash."""

    async def read(self, path: Union[str, Path]) -> DocumentContent:
        """Read the document at ``path``.

        Args:
            path: Local path to the PDF

        Returns:
            DocumentContent with page texts in order

        Raises:
            DocumentReadError: If the file is missing or unreadable
        """
        return await asyncio.to_thread(self.read_file, Path(path))

    def read_file(self, file_path: Path) -> DocumentContent:
        """Blocking counterpart of :meth:`read`."""
        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise DocumentReadError(f"Cannot read document {file_path}: {e}", original_error=e) from e

        return self.read_bytes(data, file_path.name)

    def read_bytes(self, data: bytes, filename: str = "") -> DocumentContent:
        """Extract page texts from raw PDF bytes."""
        content_hash = hashlib.sha256(data).hexdigest()

        try:
            with pdfplumber.open(BytesIO(data)) as pdf:
                pages = [
                    (page.extract_text() or "").replace("\u0000", " ").strip()
                    for page in pdf.pages
                ]
        except Exception as e:
            raise DocumentReadError(f"Cannot parse document {filename or content_hash}: {e}", original_error=e) from e

        LOGGER.info(
            f"Read {len(pages)} pages",
            extra={"content_hash": content_hash, "document_filename": filename},
        )
        return DocumentContent(
            content_hash=content_hash,
            page_count=len(pages),
            pages=pages,
            filename=filename,
        )

"""Document text extraction."""

from report_extractor.services.pdf.document_reader import DocumentContent, DocumentReader

__all__ = ["DocumentContent", "DocumentReader"]

"""Document checks run on the client before uploading to the knowledge base."""

from vectormind.parsing.pdf_validator import validate_pdf

__all__ = ["validate_pdf"]

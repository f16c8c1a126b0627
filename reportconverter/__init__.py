"""HTTP service that stores DOCX report templates, fills their placeholders and converts them to PDF."""

__version__ = "0.1.0"
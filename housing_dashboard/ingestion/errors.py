"""
Ingestion error types.

File-level errors abort an import and are reported to the client as a 400
(413 for oversize uploads). Row-level errors are collected in the import
result and never abort the file.
"""


class ImportFileError(ValueError):
    """The uploaded file as a whole cannot be imported."""


class UploadTooLargeError(ImportFileError):
    """The uploaded file exceeds the configured size limit."""


class RowImportError(ValueError):
    """A single row cannot be imported."""

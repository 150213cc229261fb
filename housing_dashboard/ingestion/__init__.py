"""
File ingestion.

- ``importer``: strict imports of spreadsheets with exact camelCase columns
- ``tolerant``: tolerant ingestion of utilization exports and style templates
- ``readers``: scratch-file handling and pandas-based table readers
"""

from .errors import ImportFileError, RowImportError, UploadTooLargeError

__all__ = ["ImportFileError", "RowImportError", "UploadTooLargeError"]

"""
Strict Import Endpoints.

Spreadsheet uploads with exact camelCase columns for budget authorities,
reserves, expenditures, commitments and utilization records, and the
matching Excel templates.
"""

from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from housing_dashboard.core.database.schemas.imports import ImportResponse, ImportSummary
from housing_dashboard.core.logging_config import get_logger
from housing_dashboard.ingestion.errors import ImportFileError, UploadTooLargeError
from housing_dashboard.ingestion.importer import IMPORT_SPECS, StrictImporter, build_template, template_filename
from housing_dashboard.ingestion.readers import remove_file, save_upload
from housing_dashboard.server.services.deps import CurrentUserDep, ReposDep, SettingsDep, WriterDep

logger = get_logger(__name__)
router = APIRouter()

ALLOWED_CONTENT_TYPES = {
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/csv",
    "application/csv",
    "text/plain",
}

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.post(
    "/upload",
    response_model=ImportResponse,
    summary="Import Spreadsheet",
    description="Import a CSV or Excel file. Rows are saved one by one and failures are reported per row.",
    responses={
        400: {"description": "Missing or invalid file or import type"},
        413: {"description": "File too large"},
    },
)
async def upload_import(
    repos: ReposDep,
    app_settings: SettingsDep,
    _: WriterDep,
    file: Optional[UploadFile] = File(default=None),
    import_type: Optional[str] = Form(default=None, alias="importType"),
) -> ImportResponse:
    """
    Import a spreadsheet.

    The upload is written to the scratch directory, imported, and removed
    whatever the outcome.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not import_type:
        raise HTTPException(status_code=400, detail="Import type is required")
    if import_type not in IMPORT_SPECS:
        raise HTTPException(status_code=400, detail="Invalid import type")
    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type. Only Excel and CSV files are allowed.")

    upload = app_settings.upload
    try:
        path = await save_upload(file, upload.upload_dir, upload.max_upload_size, prefix="import")
    except UploadTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))

    try:
        result = await StrictImporter(repos).import_file(import_type, path)
    except ImportFileError as e:
        raise HTTPException(status_code=400, detail=str(e))
    finally:
        remove_file(path)

    logger.info(f"Import of {import_type} finished: {result['success']} rows, {len(result['errors'])} errors")
    return ImportResponse(data=ImportSummary.model_validate(result))


@router.get(
    "/template/{template_type}",
    summary="Download Import Template",
    description="Download an Excel template listing the columns of an import type.",
    responses={400: {"description": "Invalid template type"}},
)
async def download_template(template_type: str, _: CurrentUserDep) -> Response:
    try:
        content = build_template(template_type)
    except ImportFileError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{template_filename(template_type)}"'},
    )

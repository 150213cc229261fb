"""
Upload Endpoints.

Loosely formatted utilization exports are ingested with tolerant column
matching; PDF, Word and text documents become writing style templates for
report generation.
"""

from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from housing_dashboard.core.database.schemas.base import MessageResponse
from housing_dashboard.core.database.schemas.imports import IngestionResult, UploadResponse
from housing_dashboard.core.database.schemas.style_templates import StyleTemplateSummary
from housing_dashboard.core.logging_config import get_logger
from housing_dashboard.ingestion.errors import ImportFileError, UploadTooLargeError
from housing_dashboard.ingestion.readers import file_kind, remove_file, save_upload
from housing_dashboard.ingestion.tolerant import UtilizationIngester, store_style_template
from housing_dashboard.server.services.deps import AdminDep, CurrentUserDep, ReposDep, SettingsDep

logger = get_logger(__name__)
router = APIRouter()

DATA_UPLOAD_TYPES = ("HCV Utilization Data", "Voucher Types Data", "Financial Data")
TEMPLATE_UPLOAD_TYPES = ("Writing Style Template", "Executive Report")
DATA_KINDS = ("csv", "excel")
TEMPLATE_KINDS = ("pdf", "word", "text")


@router.post(
    "",
    response_model=UploadResponse,
    summary="Upload File",
    description="Upload utilization data (CSV/Excel) or a writing sample (PDF/Word/text).",
    responses={400: {"description": "Invalid upload"}, 413: {"description": "File too large"}},
)
async def upload_file(
    repos: ReposDep,
    app_settings: SettingsDep,
    _: CurrentUserDep,
    file: Optional[UploadFile] = File(default=None),
    upload_type: Optional[str] = Form(default=None, alias="uploadType"),
    style_name: Optional[str] = Form(default=None, alias="styleName"),
) -> UploadResponse:
    """
    Upload a file.

    Data uploads answer with the ingestion result ``{imported, errors,
    warnings}``; template uploads with the stored template ``{id, name}``.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not upload_type:
        raise HTTPException(status_code=400, detail="Upload type is required")

    kind = file_kind(file.filename)
    if upload_type in DATA_UPLOAD_TYPES:
        if kind not in DATA_KINDS:
            raise HTTPException(
                status_code=400, detail="Invalid file type for data upload. Please use CSV or Excel files."
            )
    elif upload_type in TEMPLATE_UPLOAD_TYPES:
        if kind not in TEMPLATE_KINDS:
            raise HTTPException(
                status_code=400,
                detail="Invalid file type for style template. Please use PDF, Word, or text files.",
            )
        if upload_type == "Writing Style Template" and not (style_name or "").strip():
            raise HTTPException(status_code=400, detail="Style name is required for writing style templates")
    else:
        raise HTTPException(status_code=400, detail="Invalid upload type")

    upload = app_settings.upload
    try:
        path = await save_upload(file, upload.upload_dir, upload.max_upload_size, prefix="upload")
    except UploadTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))

    try:
        if upload_type in DATA_UPLOAD_TYPES:
            result = await UtilizationIngester(repos.utilization).ingest(path)
            logger.info(f"{upload_type} upload: {result['imported']} imported, {len(result['errors'])} errors")
            return UploadResponse(
                message=f"File processed successfully. Imported {result['imported']} records.",
                data=IngestionResult.model_validate(result).model_dump(by_alias=True),
            )

        name = (style_name or "").strip() or f"Template-{uuid4().hex[:8]}"
        created = await store_style_template(repos.style_templates, path, kind, name)
        return UploadResponse(message="Style template uploaded successfully", data=created)
    except ImportFileError as e:
        raise HTTPException(status_code=400, detail=str(e))
    finally:
        remove_file(path)


@router.get("/style-templates", response_model=List[StyleTemplateSummary], summary="List Style Templates")
async def list_style_templates(repos: ReposDep, _: CurrentUserDep):
    return await repos.style_templates.list_summaries()


@router.delete(
    "/style-templates/{template_id}",
    response_model=MessageResponse,
    summary="Delete Style Template",
    responses={404: {"description": "Style template not found"}},
)
async def delete_style_template(template_id: str, repos: ReposDep, _: AdminDep) -> MessageResponse:
    if not await repos.style_templates.delete(template_id):
        raise HTTPException(status_code=404, detail="Style template not found")
    return MessageResponse(message="Style template deleted successfully")

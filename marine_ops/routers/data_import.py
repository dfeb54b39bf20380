"""
Data import router.

Mounts under ``/api/import`` (prefix set in ``main.py``).  Requires the
``import-data`` capability.

Endpoints
---------
GET  /entities         — Importable entities and their columns.
POST /{entity}         — Upload a CSV or XLSX file for one entity
                         (form fields: overwrite, skip_duplicates,
                         validate_only).
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.schemas.import_data import ImportEntity, ImportOptions, ImportResult
from marine_ops.services import import_service
from marine_ops.services.auth_service import require_capability
from marine_ops.utils.constants import CAP_IMPORT_DATA

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Import"])

_Importer = Annotated[Profile, Depends(require_capability(CAP_IMPORT_DATA))]

_ALLOWED_CONTENT_TYPES: frozenset[str] = frozenset(
    {
        "text/csv",
        "application/vnd.ms-excel",  # some browsers label .csv this way
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",  # .xlsx
        "application/octet-stream",
    }
)


def _check_content_type(file: UploadFile) -> None:
    """Log unexpected MIME types; the parser decides whether the file is usable."""
    content_type = file.content_type or ""
    if content_type not in _ALLOWED_CONTENT_TYPES:
        logger.warning(
            "Unexpected content_type='%s' for file='%s', proceeding anyway",
            content_type,
            file.filename,
        )


@router.get("/entities", response_model=list[ImportEntity], summary="Importable entities")
def list_entities(_current_user: _Importer) -> list[ImportEntity]:
    return import_service.list_entities()


@router.post(
    "/{entity}",
    response_model=ImportResult,
    summary="Import a CSV/XLSX file",
    description=(
        "Rows are written in batches of 100. Any parse or validation error "
        "blocks the import. Progress reports follow the same rules as the "
        "API (no decrease, one report per date)."
    ),
    responses={
        401: {"description": "Missing or invalid JWT."},
        403: {"description": "Role cannot import data."},
        422: {"description": "Unknown entity or empty file."},
    },
)
async def import_entity(
    entity: str,
    file: Annotated[UploadFile, File(description="CSV or XLSX file")],
    db: Annotated[Session, Depends(get_db)],
    current_user: _Importer,
    overwrite: Annotated[bool, Form()] = False,
    skip_duplicates: Annotated[bool, Form()] = True,
    validate_only: Annotated[bool, Form()] = False,
) -> ImportResult:
    _check_content_type(file)
    options = ImportOptions(
        overwrite=overwrite,
        skip_duplicates=skip_duplicates,
        validate_only=validate_only,
    )
    result = await import_service.import_upload(db, file, entity, options, current_user)
    logger.info(
        "import_entity: entity=%s user=%s imported=%d skipped=%d errors=%d",
        entity,
        current_user.username,
        result.imported_count,
        result.skipped_count,
        len(result.errors),
    )
    return result

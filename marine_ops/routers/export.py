"""
Export router.

Mounts under ``/api/export`` (prefix set in ``main.py``).

Endpoints
---------
GET /vessels  — Denormalised vessel / work order / invoice / work detail /
                progress CSV (query param: ``vessel_ids``, repeatable).

The response streams ``text/csv`` with ``Content-Disposition: attachment``
and an ``X-Total-Records`` header carrying the number of data rows.
Callers without the ``view-financial-data`` capability get the file
without the ``payment_price`` column and an ``_operational`` filename.
"""

from __future__ import annotations

import io
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.services import export_service
from marine_ops.services.activity_log_service import ACTION_EXPORT, log_activity
from marine_ops.services.auth_service import require_capability
from marine_ops.services.progress_aggregator import MalformedProgressError
from marine_ops.utils.constants import CAP_EXPORT_DATA, EXPORT_MEDIA_TYPE

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Export"])


@router.get(
    "/vessels",
    summary="Export vessel data to CSV",
    description=(
        "Generates a CSV with one row per progress report, repeating the "
        "vessel, work order, invoice, work detail and verification columns "
        "on every row.  Entities without children still produce one row."
    ),
    response_class=StreamingResponse,
    responses={
        200: {"description": "CSV generated.", "content": {EXPORT_MEDIA_TYPE: {}}},
        401: {"description": "Missing or invalid JWT."},
        403: {"description": "Role cannot export data."},
        500: {"description": "Export failed."},
    },
)
def export_vessels(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_capability(CAP_EXPORT_DATA))],
    vessel_ids: Annotated[
        list[int] | None,
        Query(description="Vessel ids to export; omit for all vessels."),
    ] = None,
) -> StreamingResponse:
    """Generate and stream the vessel CSV export.

    Raises:
        HTTPException 500: If stored data cannot be exported.
    """
    logger.info("GET /export/vessels vessel_ids=%s user=%s", vessel_ids, current_user.username)

    try:
        result = export_service.export_vessels(db, current_user, vessel_ids)
    except MalformedProgressError as exc:
        logger.exception("Vessel export failed on malformed progress data")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Export failed: {exc}",
        ) from exc

    log_activity(
        db,
        current_user,
        ACTION_EXPORT,
        "vessel",
        None,
        f"{result.filename} ({result.total_records} records)",
    )
    db.commit()

    body = result.content.encode("utf-8")
    headers = {
        "Content-Disposition": f'attachment; filename="{result.filename}"',
        "Content-Length": str(len(body)),
        "X-Total-Records": str(result.total_records),
    }

    return StreamingResponse(
        io.BytesIO(body),
        media_type=EXPORT_MEDIA_TYPE,
        headers=headers,
    )

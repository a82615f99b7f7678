"""
app/api/routers/prices_router.py

Price archive upload and download endpoints.

POST /api/v0/prices
    multipart form field ``file``: ZIP archive holding ``data.csv``.
    Response: {"total_items": int, "total_categories": int, "total_price": number}

GET /api/v0/prices
    Response: application/zip attachment ``data.zip`` with every stored record.

All archive and store logic lives in the services; the router only maps
failures to HTTP status codes with generic messages.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.dependencies import get_archive_payload
from app.domain.errors import ArchiveBuildError, ArchiveFormatError, EncodingError, HeaderFormatError
from app.mappers.price_archive import EXPORT_FILE_NAME
from app.repositories.errors import StoreError
from app.schemas.prices import PriceImportSummaryResponse
from app.services.price_export_service import PriceExportService, get_price_export_service
from app.services.price_import_service import PriceImportService, get_price_import_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v0", tags=["prices"])


@router.post("/prices", response_model=PriceImportSummaryResponse)
def upload_prices(
    payload: bytes = Depends(get_archive_payload),
    import_service: PriceImportService = Depends(get_price_import_service),
) -> PriceImportSummaryResponse:
    """
    Import one ZIP archive of price records.
    """

    try:
        summary = import_service.import_archive(payload)
    except ArchiveFormatError as exc:
        logger.warning("Price upload rejected: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to open zip file",
        ) from exc
    except HeaderFormatError as exc:
        logger.warning("Price upload rejected: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid CSV format",
        ) from exc
    except StoreError as exc:
        logger.exception("Price import failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process file",
        ) from exc

    return PriceImportSummaryResponse(
        total_items=summary.total_items,
        total_categories=summary.total_categories,
        total_price=float(summary.total_price),
    )


@router.get(
    "/prices",
    response_class=Response,
    responses={200: {"content": {"application/zip": {}}}},
)
def download_prices(
    export_service: PriceExportService = Depends(get_price_export_service),
) -> Response:
    """
    Download every stored price record as a ZIP archive.
    """

    try:
        archive = export_service.export_archive()
    except StoreError as exc:
        logger.exception("Price export query failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve data",
        ) from exc
    except EncodingError as exc:
        logger.exception("Price export CSV encoding failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to write CSV",
        ) from exc
    except ArchiveBuildError as exc:
        logger.exception("Price export archive build failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create ZIP",
        ) from exc

    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILE_NAME}"},
    )

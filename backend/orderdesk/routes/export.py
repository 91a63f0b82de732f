"""
OrderDesk Backend - Export Route Handler
========================================

What:  POST /functions/v1/export-csv, a customer's orders as a CSV attachment.
Who:   Browser dashboard ("Export CSV" button).

Request Flow:
    1. Origin guard (403), bearer guard (403)
    2. JSON body (400 "Invalid JSON format")
    3. customerId must be UUID v4 (422)
    4. OrderExporter: ownership check, view query, CSV build
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from orderdesk.dependencies import get_exporter, require_allowed_origin, require_bearer_token
from orderdesk.routes import FUNCTIONS_PREFIX
from orderdesk.schemas.requests import ExportRequest
from orderdesk.schemas.responses import ErrorResponse
from orderdesk.services.export_service import OrderExporter
from orderdesk.validation import read_json_object, validate_payload

router = APIRouter(prefix=FUNCTIONS_PREFIX, tags=["Export"])


@router.post(
    "/export-csv",
    response_class=Response,
    responses={
        200: {"description": "CSV attachment", "content": {"text/csv": {}}},
        400: {"description": "Body is not valid JSON", "model": ErrorResponse},
        403: {"description": "Origin, credential or ownership rejected", "model": ErrorResponse},
        404: {"description": "Customer has no orders", "model": ErrorResponse},
        422: {"description": "customerId is not a UUID v4", "model": ErrorResponse},
        500: {"description": "Ownership check or query failed", "model": ErrorResponse},
    },
    summary="Export a customer's orders as CSV",
    dependencies=[Depends(require_allowed_origin)],
)
async def export_csv(
    request: Request,
    token: str = Depends(require_bearer_token),
    exporter: OrderExporter = Depends(get_exporter),
) -> Response:
    payload = await read_json_object(request, invalid_message="Invalid JSON format")
    body = validate_payload(ExportRequest, payload, status_code=422)

    document = await exporter.export(body.customer_id, token)
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": document.content_disposition},
    )

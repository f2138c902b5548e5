from fastapi import APIRouter, HTTPException, Response, Query
from app.schemas.export import ExportRequest, StoredExportResponse
from app.services.delivery import InMemoryDelivery, R2Delivery
from app.services.exporter import ExportService
from app.services.exporters import resolve_diagram
from app.models import IMAGE_FORMATS
from app.utils.logging import logger
from app.config import settings

router = APIRouter(prefix='/export', tags=['export'])


@router.post('/generate')
def generate_export(
    req: ExportRequest,
    delivery: str = Query("stream", description="stream | url (return signed URL if Cloudflare R2 enabled)"),
):
    fmt = req.options.format
    diagram = None
    if fmt in IMAGE_FORMATS:
        diagram = resolve_diagram(req.solutions, req.diagram_solution_id)

    use_r2 = delivery == 'url' and settings.r2_configured
    if delivery == 'url' and not use_r2:
        logger.info('R2 not configured, streaming export instead', extra={"export_format": fmt.value})

    service = ExportService(delivery=R2Delivery() if use_r2 else InMemoryDelivery())
    result = service.export(req.solutions, req.options, diagram=diagram)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)

    if use_r2:
        return StoredExportResponse(
            filename=result.filename,
            content_type=result.content_type,
            url=result.location,
        )

    return Response(
        content=result.data,
        media_type=result.content_type,
        headers={'Content-Disposition': f'attachment; filename="{result.filename}"'}
    )

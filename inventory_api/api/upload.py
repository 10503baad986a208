from fastapi import APIRouter, Depends, File, Request, UploadFile

from inventory_api.api.deps import get_app_settings
from inventory_api.config import Settings
from inventory_api.exceptions import ValidationError
from inventory_api.schemas.upload import UploadResponse
from inventory_api.services.upload_service import UploadService

router = APIRouter(tags=["Upload"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload a product image",
    description=(
        "Multipart upload of a single image (field `image`, 5MB max). "
        "Oversized bodies are refused by `UploadSizeLimitMiddleware` before the form is read."
    )
)
async def upload_image(
    request: Request,
    image: UploadFile = File(None),
    settings: Settings = Depends(get_app_settings)
):
    if image is None or not image.filename:
        raise ValidationError("No file uploaded")

    service = UploadService(settings.UPLOAD_DIR, settings.MAX_UPLOAD_SIZE)
    stored = await service.store_image(image)

    url = f"/uploads/{stored.filename}"
    return UploadResponse(
        filename=stored.filename,
        originalName=stored.original_name,
        size=stored.size,
        url=url,
        fullUrl=f"{str(request.base_url).rstrip('/')}{url}"
    )

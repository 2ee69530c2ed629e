import logging

from fastapi import APIRouter, Depends, Request, Response

from portal.api.deps import get_upload_store, require_admin
from portal.models import User
from portal.schemas import UploadPutResponse, UploadURLRequest, UploadURLResponse
from portal.services.storage import UploadStore, public_base_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.post("/request-url", response_model=UploadURLResponse, response_model_by_alias=True)
async def request_upload_url(
    payload: UploadURLRequest,
    request: Request,
    admin: User = Depends(require_admin),
    store: UploadStore = Depends(get_upload_store),
) -> UploadURLResponse:
    issued = store.issue(payload.name, public_base_url(request))
    logger.info(
        "Issued upload key %s to %s (declared size=%s, type=%s)",
        issued.key,
        admin.email,
        payload.size,
        payload.content_type,
    )
    return UploadURLResponse(
        upload_url=issued.upload_url,
        file_url=issued.file_url,
        content_type=payload.content_type,
    )


@router.put(
    "/put/{file_name:path}",
    name="upload_file",
    response_model=UploadPutResponse,
    response_model_by_alias=True,
    dependencies=[Depends(require_admin)],
)
async def upload_file(
    file_name: str,
    request: Request,
    response: Response,
    store: UploadStore = Depends(get_upload_store),
) -> UploadPutResponse:
    stored = await store.save_stream(file_name, request.stream(), public_base_url(request))
    response.headers["ETag"] = stored.etag
    response.headers["Access-Control-Expose-Headers"] = "ETag"
    return UploadPutResponse(file_url=stored.file_url)

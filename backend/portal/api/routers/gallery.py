from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.deps import get_db, require_admin
from portal.models import GalleryCategory
from portal.schemas import GalleryImageCreate, GalleryImageRead, GalleryImageUpdate
from portal.services import gallery as gallery_service

router = APIRouter(prefix="/api", tags=["gallery"])
admin_router = APIRouter(
    prefix="/api/admin/gallery",
    tags=["gallery"],
    dependencies=[Depends(require_admin)],
)


@router.get("/gallery", response_model=list[GalleryImageRead])
async def list_public_gallery(
    category: GalleryCategory | None = None,
    session: AsyncSession = Depends(get_db),
) -> list[GalleryImageRead]:
    images = await gallery_service.list_images(session, active_only=True, category=category)
    return [GalleryImageRead.model_validate(image) for image in images]


@admin_router.get("", response_model=list[GalleryImageRead])
async def list_gallery(session: AsyncSession = Depends(get_db)) -> list[GalleryImageRead]:
    images = await gallery_service.list_images(session, active_only=False)
    return [GalleryImageRead.model_validate(image) for image in images]


@admin_router.post("", response_model=GalleryImageRead, status_code=status.HTTP_201_CREATED)
async def create_gallery_image(
    payload: GalleryImageCreate,
    session: AsyncSession = Depends(get_db),
) -> GalleryImageRead:
    image = await gallery_service.create_image(session, payload)
    return GalleryImageRead.model_validate(image)


@admin_router.patch("/{image_id}", response_model=GalleryImageRead)
async def update_gallery_image(
    image_id: str,
    payload: GalleryImageUpdate,
    session: AsyncSession = Depends(get_db),
) -> GalleryImageRead:
    image = await gallery_service.update_image(session, image_id, payload)
    return GalleryImageRead.model_validate(image)


@admin_router.delete("/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gallery_image(
    image_id: str,
    session: AsyncSession = Depends(get_db),
) -> Response:
    await gallery_service.delete_image(session, image_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

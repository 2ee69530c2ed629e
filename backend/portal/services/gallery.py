from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.errors import NotFoundError
from portal.models import GalleryCategory, GalleryImage
from portal.schemas import GalleryImageCreate, GalleryImageUpdate


async def list_images(
    session: AsyncSession,
    active_only: bool = True,
    category: GalleryCategory | None = None,
) -> list[GalleryImage]:
    stmt = select(GalleryImage).order_by(GalleryImage.order, GalleryImage.created_at.desc())
    if active_only:
        stmt = stmt.where(GalleryImage.is_active.is_(True))
    if category is not None:
        stmt = stmt.where(GalleryImage.category == category)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_image(session: AsyncSession, payload: GalleryImageCreate) -> GalleryImage:
    image = GalleryImage(**payload.model_dump())
    session.add(image)
    await session.commit()
    await session.refresh(image)
    return image


async def _get_image(session: AsyncSession, image_id: str) -> GalleryImage:
    image = await session.get(GalleryImage, image_id)
    if not image:
        raise NotFoundError("Gallery image not found")
    return image


async def update_image(
    session: AsyncSession, image_id: str, payload: GalleryImageUpdate
) -> GalleryImage:
    image = await _get_image(session, image_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(image, field, value)
    await session.commit()
    await session.refresh(image)
    return image


async def delete_image(session: AsyncSession, image_id: str) -> None:
    # Only the record goes; the stored file stays in the upload directory.
    image = await _get_image(session, image_id)
    await session.delete(image)
    await session.commit()

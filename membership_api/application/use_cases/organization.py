import structlog
from sqlalchemy.orm import Session

from ...domain.entities import OrganizationPosition, UploadedFile
from ...domain.errors import NotFoundError, ValidationError
from ...infrastructure.models import OrganizationStructure
from ..dto import parse_enum
from ..media import MediaBucket

logger = structlog.get_logger()

POSITION_MISMATCH = "Position is not Match"


class OrganizationService:
    def __init__(self, db: Session, images: MediaBucket):
        self.db = db
        self.images = images

    def list(self) -> list[OrganizationStructure]:
        return self.db.query(OrganizationStructure).order_by(OrganizationStructure.order.asc()).all()

    def create(self, name: str | None, order: int | None, position: str | None, image: UploadedFile | None) -> OrganizationStructure:
        if not name or order is None or not position:
            raise ValidationError("Name, Order, and Position are all required.")
        if image is None:
            raise ValidationError("Image is required")
        slot = parse_enum(OrganizationPosition, position, POSITION_MISMATCH)

        url = self.images.upload_or_fail(image)
        row = OrganizationStructure(name=name, order=order, position=slot, media_url=url)
        self.db.add(row); self.db.commit(); self.db.refresh(row)
        logger.info("organization_structure_created", structure_id=row.id, position=slot.value)
        return row

    def update(
        self,
        structure_id: str,
        name: str | None,
        order: int | None,
        position: str | None,
        image: UploadedFile | None,
    ) -> OrganizationStructure:
        slot = parse_enum(OrganizationPosition, position, POSITION_MISMATCH)
        row = self.db.get(OrganizationStructure, structure_id)
        if row is None:
            raise NotFoundError("Organization Structure not found")

        if image is not None:
            row.media_url = self.images.replace_single(row.media_url, image)
        row.position = slot
        if name:
            row.name = name
        if order is not None:
            row.order = order
        self.db.commit(); self.db.refresh(row)
        return row

    def delete(self, structure_id: str) -> None:
        row = self.db.get(OrganizationStructure, structure_id)
        if row is None:
            raise NotFoundError("Organization Structure not found")
        media_url = row.media_url
        self.db.delete(row); self.db.commit()
        if media_url:
            self.images.remove_urls([media_url])

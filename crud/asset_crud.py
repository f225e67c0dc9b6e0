from sqlalchemy.orm import Session

from models.asset import Asset
from schemas.asset_schema import AssetCreate


def get_asset_by_filename(db: Session, filename: str):
    return db.query(Asset).filter(Asset.filename == filename).first()


def create_asset(db: Session, payload: AssetCreate):
    asset = Asset(
        user_id=payload.user_id,
        filename=payload.filename,
        original_name=payload.original_name,
        mime_type=payload.mime_type,
        size_bytes=payload.size_bytes,
        storage_path=payload.storage_path,
    )
    db.add(asset)
    db.commit()
    db.refresh(asset)
    return asset

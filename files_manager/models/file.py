import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String

from files_manager.core.database import Base

ROOT_PARENT_ID = "0"


class FileType(str, enum.Enum):
    FOLDER = "folder"
    FILE = "file"
    IMAGE = "image"


class File(Base):
    __tablename__ = "files"
    __table_args__ = (
        Index("ix_files_owner_parent_name", "owner_id", "parent_id", "name"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    type = Column(String(16), nullable=False)
    parent_id = Column(String(36), nullable=False, default=ROOT_PARENT_ID)
    is_public = Column(Boolean, nullable=False, default=False)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    # only set for file and image rows
    local_path = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, text, update
from sqlalchemy.exc import SQLAlchemyError

from files_manager.core.database import Base, build_engine, build_sessionmaker
from files_manager.core.exceptions import InternalError
from files_manager.models.file import File
from files_manager.models.user import User

logger = logging.getLogger("files-manager")

SORTABLE_COLUMNS = {
    "name": File.name,
}

FILTERABLE_COLUMNS = {
    "id": File.id,
    "owner_id": File.owner_id,
    "parent_id": File.parent_id,
    "type": File.type,
    "is_public": File.is_public,
}


class CredentialStore:
    """User and file-metadata records kept in the relational database."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.engine = None
        self.sessionmaker = None

    async def connect(self, create_tables: bool = True) -> None:
        self.engine = build_engine(self.database_url, echo=self.echo)
        self.sessionmaker = build_sessionmaker(self.engine)
        if create_tables:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("Credential store connected")

    async def is_alive(self) -> bool:
        if self.engine is None:
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Credential store check failed: %s", e)
            return False

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self.sessionmaker = None

    async def find_user_by_email_and_password_hash(self, email: str, password_hash: str) -> Optional[User]:
        return await self._first(
            select(User).where(User.email == email, User.hashed_password == password_hash)
        )

    async def find_user_by_id(self, user_id: str) -> Optional[User]:
        return await self._first(select(User).where(User.id == user_id))

    async def insert_file_entity(self, row: File) -> str:
        try:
            async with self.sessionmaker() as db:
                db.add(row)
                await db.commit()
                await db.refresh(row)
        except SQLAlchemyError as e:
            logger.error("Insert into files failed: %s", e)
            raise InternalError()
        return row.id

    async def find_file_entity_by_id(self, file_id: str, owner_id: str | None = None) -> Optional[File]:
        query = select(File).where(File.id == file_id)
        if owner_id is not None:
            query = query.where(File.owner_id == owner_id)
        return await self._first(query)

    async def find_file_entities(
        self,
        filters: Dict[str, Any],
        sort: str = "name",
        skip: int = 0,
        limit: int = 20,
    ) -> List[File]:
        query = select(File)
        for key, value in filters.items():
            query = query.where(FILTERABLE_COLUMNS[key] == value)
        # id breaks ties so equal names keep a stable order
        query = query.order_by(SORTABLE_COLUMNS[sort].asc(), File.id.asc()).offset(skip).limit(limit)
        try:
            async with self.sessionmaker() as db:
                return list((await db.execute(query)).scalars().all())
        except SQLAlchemyError as e:
            logger.error("Query on files failed: %s", e)
            raise InternalError()

    async def update_file_entity_visibility(self, file_id: str, is_public: bool) -> bool:
        try:
            async with self.sessionmaker() as db:
                res = await db.execute(
                    update(File).where(File.id == file_id).values(is_public=is_public)
                )
                await db.commit()
        except SQLAlchemyError as e:
            logger.error("Visibility update failed for %s: %s", file_id, e)
            raise InternalError()
        return res.rowcount > 0

    async def _first(self, query):
        try:
            async with self.sessionmaker() as db:
                return (await db.execute(query)).scalars().first()
        except SQLAlchemyError as e:
            logger.error("Credential store query failed: %s", e)
            raise InternalError()


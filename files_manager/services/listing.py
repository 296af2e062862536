from typing import List

from files_manager.models.user import User
from files_manager.schemas.file import FileEntity, to_entity
from files_manager.services.credential_store import CredentialStore
from files_manager.services.file_service import normalize_parent_id

DEFAULT_PAGE_SIZE = 20


def normalize_page(page) -> int:
    try:
        page = int(page)
    except (TypeError, ValueError):
        return 1
    return max(page, 1)


class ListingService:
    def __init__(self, credential_store: CredentialStore, page_size: int = DEFAULT_PAGE_SIZE):
        self.credential_store = credential_store
        self.page_size = page_size

    async def list_children(self, user: User, parent_id=None, page=1) -> List[FileEntity]:
        """One page of the caller's entities directly under ``parent_id``, by name.

        An unknown parent, or one that is not a folder, simply yields an empty page.
        """
        skip = (normalize_page(page) - 1) * self.page_size
        rows = await self.credential_store.find_file_entities(
            {"parent_id": normalize_parent_id(parent_id), "owner_id": str(user.id)},
            sort="name",
            skip=skip,
            limit=self.page_size,
        )
        return [to_entity(row) for row in rows]

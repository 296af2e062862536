from fastapi import Request

from files_manager.services.content_service import ContentService
from files_manager.services.file_service import FileService
from files_manager.services.listing import ListingService
from files_manager.services.session_manager import SessionManager


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


def get_listing_service(request: Request) -> ListingService:
    return request.app.state.listing_service


def get_content_service(request: Request) -> ContentService:
    return request.app.state.content_service

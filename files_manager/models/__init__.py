from .file import ROOT_PARENT_ID, File, FileType
from .user import User

__all__ = ["File", "FileType", "ROOT_PARENT_ID", "User"]

from .auth import router as auth
from .download import router as download
from .files import router as files
from .users import router as users

# SQLModel definitions, imported here to ensure metadata is populated before create_all.
from .base import CreatedAtMixin, IntIDMixin  # noqa: F401
from .user import UserRow  # noqa: F401
from .project import ProjectRow  # noqa: F401
from .request import RequestRow  # noqa: F401
from .pitch import PitchRow  # noqa: F401
from .rating import RatingRow  # noqa: F401
from .upload import UploadRow  # noqa: F401

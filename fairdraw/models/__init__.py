from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .draw_list import DrawList  # noqa: F401
from .draw_record import DrawRecord  # noqa: F401

__all__ = [
    "Base",
    "DrawList",
    "DrawRecord",
]

from .list import run as list_run
from .remove import run as remove_run

__all__ = ["list_run", "remove_run"]

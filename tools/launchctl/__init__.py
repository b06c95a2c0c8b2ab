from .list import run as list_run
from .load import run as load_run
from .print_disabled import run as print_disabled_run
from .unload import run as unload_run

__all__ = ["list_run", "load_run", "print_disabled_run", "unload_run"]

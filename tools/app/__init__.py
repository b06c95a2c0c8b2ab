from .reveal import run as reveal_run

__all__ = ["reveal_run"]

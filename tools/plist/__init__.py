from .label import run as label_run

__all__ = ["label_run"]

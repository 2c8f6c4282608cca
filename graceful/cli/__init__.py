from .shell import run

__all__ = ["run"]

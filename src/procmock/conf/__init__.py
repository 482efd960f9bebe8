from .defaults import DEFAULTS

__all__ = ["DEFAULTS"]

"""List pages of the admin dashboard."""

from .definitions import PAGES

__all__ = ["PAGES"]

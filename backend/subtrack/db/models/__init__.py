"""Re-export all models so Base.metadata sees them."""

from subtrack.db.models.profile import Profile

__all__ = [
    "Profile",
]

from enum import Enum


class ListingState(str, Enum):
    """States a market listing can be in."""

    ACTIVE = "ACTIVE"
    SOLD = "SOLD"

    @property
    def is_terminal(self) -> bool:
        """Terminal states cannot be transitioned out of."""
        return self is ListingState.SOLD

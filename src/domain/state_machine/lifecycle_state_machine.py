from src.domain.enums.listing_state import ListingState


# Mapping of valid transitions: from_state -> set of allowed to_states
VALID_TRANSITIONS: dict[ListingState, frozenset[ListingState]] = {
    ListingState.ACTIVE: frozenset({ListingState.SOLD}),
    ListingState.SOLD: frozenset(),
}


class InvalidStateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(
        self,
        from_state: ListingState,
        to_state: ListingState,
        allowed: frozenset[ListingState],
    ) -> None:
        self.from_state = from_state
        self.to_state = to_state
        self.allowed = allowed
        super().__init__(
            f"Invalid transition from {from_state.value} to {to_state.value}. "
            f"Allowed transitions: {sorted(s.value for s in allowed)}"
        )


class LifecycleStateMachine:
    """
    Validates state transitions for a listing.

    Stateless: call can_transition() or validate_transition() with explicit states.
    """

    def can_transition(self, from_state: ListingState, to_state: ListingState) -> bool:
        """Return True if transitioning from_state → to_state is permitted."""
        if from_state.is_terminal:
            return False
        return to_state in self.get_allowed_transitions(from_state)

    def validate_transition(self, from_state: ListingState, to_state: ListingState) -> None:
        """Raise InvalidStateTransitionError if the transition is not permitted."""
        if not self.can_transition(from_state, to_state):
            raise InvalidStateTransitionError(
                from_state, to_state, self.get_allowed_transitions(from_state)
            )

    def get_allowed_transitions(self, from_state: ListingState) -> frozenset[ListingState]:
        """Return the set of states reachable from from_state."""
        return VALID_TRANSITIONS.get(from_state, frozenset())

"""Prerequisite checking helpers for MCP tools."""


def require_state(state, *, venues: bool = False, idle: bool = False) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(state, venues=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if idle and state.is_loading:
        raise ValueError(
            "A venue load is in progress; wait for load_venues to finish."
        )
    if venues and not state.full_collection:
        raise ValueError(
            "Load venues first with load_venues."
        )

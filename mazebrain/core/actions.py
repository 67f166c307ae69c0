"""Turn a room path into the per-tick steps the agent has to press."""

from .maze_state import TRANSITION, Position
from .moves import ActionStep, MoveResult, classify_move


def convert_path_to_actions(grid: list[list[int]], path: list[Position]) -> list[ActionStep]:
    """
    Convert a path into unit steps.

    Pairs touching the transition marker produce no step: the agent stays on
    the key it just picked up. Crossing a door takes two ticks, one to use
    the key and one to walk through, so its step is emitted twice.

    Args:
        grid: The floor grid as the agent will find it, with doors still
            closed.
        path: Rooms from source to destination, possibly with TRANSITION
            markers.

    Returns:
        List of ActionSteps, empty for a path of fewer than two rooms.
    """
    actions: list[ActionStep] = []
    for current, following in zip(path, path[1:]):
        if current == TRANSITION or following == TRANSITION:
            continue

        delta = current.delta_to(following)
        actions.append(ActionStep(*delta))

        move = classify_move(grid, current, delta)
        if move in (MoveResult.REQUIRES_KEY_A, MoveResult.REQUIRES_KEY_B):
            actions.append(ActionStep(*delta))

    return actions

"""MazeBrain: next-step solver for key and door mazes."""

"""Convert a wall-clock time between two cities, DST-aware."""

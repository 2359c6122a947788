"""
Loop closure validation module.

Judges whether a finished path returns to its starting point within the
closure threshold.
"""

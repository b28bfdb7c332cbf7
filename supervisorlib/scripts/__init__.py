"""
Command line entrypoints, one console script per decorated function.
"""

"""Domain layer for plantree.

Pure models and functions: no I/O, no side effects.
"""

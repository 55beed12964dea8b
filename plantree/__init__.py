"""plantree - hierarchical plan document engine.

The engine behind a plan widget: a tree of typed rows with commands
for editing, reordering, searching and status tracking.
"""

__version__ = "0.3.0"

# Design Planner - Core Library
"""
Slot layout engine and assignment persistence for the team planner.
"""

__version__ = "1.0.0"

"""Controllers for the manuscripts module."""

from manuscripts.controllers.comparison_controller import ComparisonController

__all__ = ["ComparisonController"]

from .visibility import FogState, VisibilityCalculator

__all__ = ["FogState", "VisibilityCalculator"]

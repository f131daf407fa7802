"""Layout engine for force, circle, grid and hierarchy graphs."""

from .engine import LayerState, LayoutEngine, compute_hierarchy_layers, natural_key

__all__ = ["LayerState", "LayoutEngine", "compute_hierarchy_layers", "natural_key"]

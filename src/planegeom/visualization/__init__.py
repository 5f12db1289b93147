"""
Visualization utilities.
"""

from .plotting import plot_geometry, plot_overlay

__all__ = ['plot_geometry', 'plot_overlay']

"""
Visualization utilities for geometry plotting.

Contains plotting functions for:
- any single geometry (polygons with holes, lines, points)
- two overlay operands together with the overlay result
"""

from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import PathPatch
from matplotlib.path import Path

from ..core.geometry import Geometry, LineString, Point, Polygon, iter_atoms
from ..ops.measure import area, ring_signed_area


def _ring_codes(count: int) -> np.ndarray:
    codes = np.full(count, Path.LINETO, dtype=Path.code_type)
    codes[0] = Path.MOVETO
    codes[-1] = Path.CLOSEPOLY
    return codes


def _polygon_path(polygon: Polygon) -> Path:
    """Compound path whose holes wind opposite to the shell, so they are cut out."""
    vertices = []
    codes = []
    shell_ccw = ring_signed_area(polygon.exterior.coords) > 0
    for index, ring in enumerate(polygon.rings):
        coords = ring.coords
        ccw = ring_signed_area(coords) > 0
        # Shell keeps its orientation; holes must wind the other way
        if index > 0 and ccw == shell_ccw:
            coords = coords[::-1]
        vertices.append(coords)
        codes.append(_ring_codes(len(coords)))
    return Path(np.vstack(vertices), np.concatenate(codes))


def plot_geometry(
    geom: Geometry,
    ax: Optional[plt.Axes] = None,
    color: str = 'steelblue',
    alpha: float = 0.3,
    label: Optional[str] = None,
    title: Optional[str] = None
) -> plt.Axes:
    """
    Draw a geometry in 2D.

    Parameters
    ----------
    geom : Geometry
        Geometry to draw. Empty members are skipped.
    ax : plt.Axes, optional
        Matplotlib axes to plot on. Creates new figure if None.
    color : str
        Colour of fills, edges and markers.
    alpha : float
        Fill opacity of polygons.
    label : str, optional
        Legend label, attached to the first drawn member.
    title : str, optional
        Plot title.

    Returns
    -------
    plt.Axes
        The matplotlib axes object.
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 8))

    for atom in iter_atoms(geom):
        if atom.is_empty:
            continue
        if isinstance(atom, Polygon):
            ax.add_patch(PathPatch(
                _polygon_path(atom),
                facecolor=color, edgecolor=color, alpha=alpha, label=label, zorder=1
            ))
            for ring in atom.rings:
                ax.plot(ring.coords[:, 0], ring.coords[:, 1], '-', color=color, linewidth=1.5, zorder=2)
        elif isinstance(atom, LineString):
            ax.plot(atom.coords[:, 0], atom.coords[:, 1], '-', color=color,
                    linewidth=2, label=label, zorder=3)
        elif isinstance(atom, Point):
            ax.scatter([atom.x], [atom.y], c=color, s=30, label=label, zorder=4)
        label = None

    ax.autoscale_view()
    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    if title is not None:
        ax.set_title(title)
    ax.set_aspect('equal', adjustable='datalim')
    ax.grid(True, alpha=0.3)

    return ax


def plot_overlay(
    a: Geometry,
    b: Geometry,
    result: Geometry,
    ax: Optional[plt.Axes] = None,
    title: str = "Overlay",
    show_stats: bool = True
) -> plt.Axes:
    """
    Visualize two operands and the result of an overlay operation.

    Parameters
    ----------
    a, b : Geometry
        Operands, drawn faintly.
    result : Geometry
        Overlay result, drawn on top.
    ax : plt.Axes, optional
        Matplotlib axes to plot on. Creates new figure if None.
    title : str
        Plot title.
    show_stats : bool
        Whether to annotate the areas of the operands and the result.

    Returns
    -------
    plt.Axes
        The matplotlib axes object.
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 8))

    plot_geometry(a, ax=ax, color='steelblue', alpha=0.15, label='A')
    plot_geometry(b, ax=ax, color='coral', alpha=0.15, label='B')
    plot_geometry(result, ax=ax, color='green', alpha=0.4, label='Result', title=title)

    if show_stats:
        stats_text = (
            f"Area A: {area(a):.2f}\n"
            f"Area B: {area(b):.2f}\n"
            f"Result: {result.geom_type.keyword}\n"
            f"Area: {area(result):.2f}"
        )
        ax.text(
            0.02, 0.98, stats_text,
            transform=ax.transAxes,
            verticalalignment='top',
            fontfamily='monospace',
            fontsize=9,
            bbox=dict(boxstyle='round', facecolor='white', alpha=0.8)
        )

    if ax.get_legend_handles_labels()[0]:
        ax.legend(loc='upper right')

    return ax

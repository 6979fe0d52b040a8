################################
# Plotting Module
# Written by: Hossein Karagah
# Date: 2026-10-16
# Description: This module draws column sections and interaction results. All styling comes from an explicit PlotStyle object; matplotlib global settings are never modified.
################################
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import matplotlib
import matplotlib.axes
import matplotlib.pyplot as plt
import numpy as np

from polycolumn.concrete import ReinforcedSection
from polycolumn.interaction import InteractionPoint, InteractionSurface
from polycolumn.shapes import rotate_coordinates


@dataclass
class PlotStyle:
    fig_size: Tuple[float, float] = (6, 6)
    font_size: float = 10
    section_color: str = 'lightgray'
    zone_color: str = 'tab:orange'
    zone_alpha: float = 0.6
    edge_color: str = 'black'
    bar_color: str = 'black'
    neutral_axis_color: str = 'tab:red'
    centroid_color: str = 'tab:blue'
    line_width: float = 1.5
    marker_size: float = 4
    colormap: str = 'viridis'
    moment_scale: float = 1.0
    force_unit: str = 'kips'
    moment_unit: str = 'kip-in'
    grid: bool = True

    @classmethod
    def kip_ft(cls, **kwargs) -> 'PlotStyle':
        """Returns a style that reports moments in kip-ft."""
        return cls(moment_scale=1 / 12, moment_unit='kip-ft', **kwargs)

    def colors(self, n: int) -> np.ndarray:
        return matplotlib.colormaps[self.colormap](np.linspace(0, 1, max(n, 1)))


def _new_axes(ax: Optional[matplotlib.axes.Axes], style: PlotStyle) -> matplotlib.axes.Axes:
    if ax is None:
        _, ax = plt.subplots(figsize=style.fig_size)
    if style.grid:
        ax.grid(True, linewidth=0.5, alpha=0.5)
    ax.tick_params(labelsize=style.font_size)
    return ax


def plot_section(section: ReinforcedSection, point: Optional[InteractionPoint] = None,
                 style: Optional[PlotStyle] = None, ax: matplotlib.axes.Axes = None) -> matplotlib.axes.Axes:
    """Plots the section outline, bars and plastic centroid in the fixed section axes.

    When an interaction point is given, its compression zones and neutral axis are drawn too. Both
    are found in the rotated frame of the point and are rotated back for display.

    Args:
        section (ReinforcedSection): Un-rotated section.
        point (Optional[InteractionPoint], optional): Solved point to overlay. Defaults to None.
        style (Optional[PlotStyle], optional): Plot style. Defaults to PlotStyle().
        ax (matplotlib.axes.Axes, optional): The axis to plot on. If None, a new figure and axis will be created.

    Returns:
        matplotlib.axes.Axes: The axis drawn on.
    """
    style = style if style is not None else PlotStyle()
    ax = _new_axes(ax, style)
    section.shape.plot(ax, facecolor=style.section_color, edgecolor=style.edge_color,
                       linewidth=style.line_width, zorder=1)

    if point is not None and point.valid:
        for zone in point.zones:
            zone.rotate(-point.angle).plot(ax, facecolor=style.zone_color, edgecolor=style.edge_color,
                                           linewidth=0.5 * style.line_width, alpha=style.zone_alpha, zorder=2)
        _plot_neutral_axis(section, point, style, ax)

    section.reinforcement.plot(ax, facecolor=style.bar_color, edgecolor=style.bar_color, zorder=3)
    pc = section.plastic_centroid
    ax.plot([pc.x], [pc.y], marker='+', markersize=3 * style.marker_size, color=style.centroid_color, zorder=4)
    ax.set_aspect('equal')
    return ax


def _plot_neutral_axis(section: ReinforcedSection, point: InteractionPoint, style: PlotStyle, ax: matplotlib.axes.Axes):
    rotated = section.shape.rotate(point.angle)
    y = rotated.y_max - point.c
    # Extend a little past the outline so the line stays visible at the section edges
    pad = 0.05 * (rotated.x_max - rotated.x_min)
    line = np.array([[rotated.x_min - pad, y], [rotated.x_max + pad, y]])
    line = rotate_coordinates(line, -point.angle)
    ax.plot(line[:, 0], line[:, 1], linestyle='--', color=style.neutral_axis_color,
            linewidth=style.line_width, zorder=5)


def plot_meridians(surface: InteractionSurface, angles: Optional[Sequence[float]] = None,
                   style: Optional[PlotStyle] = None, ax: matplotlib.axes.Axes = None) -> matplotlib.axes.Axes:
    """Plots P-M curves per bending angle, |Mx| on the positive and -|My| on the negative moment axis.

    Args:
        surface (InteractionSurface): Generated surface.
        angles (Optional[Sequence[float]], optional): Angles to draw. Defaults to all angles of the surface.
        style (Optional[PlotStyle], optional): Plot style. Defaults to PlotStyle().
        ax (matplotlib.axes.Axes, optional): The axis to plot on. If None, a new figure and axis will be created.
    """
    style = style if style is not None else PlotStyle()
    ax = _new_axes(ax, style)
    angles = surface.angles if angles is None else angles
    for angle, color in zip(angles, style.colors(len(angles))):
        points = surface.meridian(angle)
        if not points:
            continue
        P = np.array([p.Pn for p in points])
        Mx = np.abs([p.Mx for p in points]) * style.moment_scale
        My = -np.abs([p.My for p in points]) * style.moment_scale
        ax.plot(Mx, P, color=color, linewidth=style.line_width, marker='o',
                markersize=style.marker_size, label=f"{angle:g}°")
        ax.plot(My, P, color=color, linewidth=style.line_width, linestyle='--')

    ax.axvline(0, color=style.edge_color, linewidth=0.5)
    ax.set_xlabel(f"|Mx|  /  -|My| ({style.moment_unit})", fontsize=style.font_size)
    ax.set_ylabel(f"P ({style.force_unit})", fontsize=style.font_size)
    ax.legend(fontsize=style.font_size)
    return ax


def plot_load_contours(surface: InteractionSurface, loads: Optional[Sequence[float]] = None,
                       style: Optional[PlotStyle] = None, ax: matplotlib.axes.Axes = None) -> matplotlib.axes.Axes:
    """Plots the Mx-My contour of each load level as a closed ring."""
    style = style if style is not None else PlotStyle()
    ax = _new_axes(ax, style)
    loads = surface.loads if loads is None else loads
    for load, color in zip(loads, style.colors(len(loads))):
        points = surface.contour(load)
        if not points:
            continue
        Mx = np.array([p.Mx for p in points] + [points[0].Mx]) * style.moment_scale
        My = np.array([p.My for p in points] + [points[0].My]) * style.moment_scale
        ax.plot(Mx, My, color=color, linewidth=style.line_width, marker='o',
                markersize=style.marker_size, label=f"P = {load:.1f} {style.force_unit}")

    ax.set_xlabel(f"Mx ({style.moment_unit})", fontsize=style.font_size)
    ax.set_ylabel(f"My ({style.moment_unit})", fontsize=style.font_size)
    ax.set_aspect('equal', adjustable='datalim')
    ax.legend(fontsize=style.font_size)
    return ax

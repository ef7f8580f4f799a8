"""
Graph builder for the supply & demand calculator.

Produces a matplotlib Figure for embedding in the Tkinter GUI (and for the
PDF export).  Quantity runs along X, price along Y:
  - original demand / supply : solid lines
  - shifted demand / supply  : dashed lines, only while a shift is active
  - E0 / E1                  : original / shifted equilibrium markers
"""

import numpy as np
from matplotlib.figure import Figure

from market.series import curve_arrays

# ── palettes ───────────────────────────────────────────────────────────────
_LIGHT_GRAPH = dict(
    C_BG    = "#ffffff",
    C_AX    = "#f7f9fc",
    C_GRID  = "#dde2ea",
    C_TICK  = "#555555",
    C_SPINE = "#c5ccd6",
    C_TEXT  = "#333333",
    C_LEGEND= "#ffffff",
)

_DARK_GRAPH = dict(
    C_BG    = "#0f0f0f",
    C_AX    = "#181818",
    C_GRID  = "#252525",
    C_TICK  = "#666666",
    C_SPINE = "#333333",
    C_TEXT  = "#cccccc",
    C_LEGEND= "#1e1e1e",
)

# Curve colours do not change with the theme
C_DEMAND         = "#63C2FF"
C_SUPPLY         = "#D52331"
C_DEMAND_SHIFTED = "#8681BD"
C_SUPPLY_SHIFTED = "#FF4F29"

C_BG     = _LIGHT_GRAPH["C_BG"]
C_AX     = _LIGHT_GRAPH["C_AX"]
C_GRID   = _LIGHT_GRAPH["C_GRID"]
C_TICK   = _LIGHT_GRAPH["C_TICK"]
C_SPINE  = _LIGHT_GRAPH["C_SPINE"]
C_TEXT   = _LIGHT_GRAPH["C_TEXT"]
C_LEGEND = _LIGHT_GRAPH["C_LEGEND"]

_CURVES = (
    ("demand_price",         "Original demand", C_DEMAND,         "-"),
    ("supply_price",         "Original supply", C_SUPPLY,         "-"),
    ("shifted_demand_price", "New demand",      C_DEMAND_SHIFTED, "--"),
    ("shifted_supply_price", "New supply",      C_SUPPLY_SHIFTED, "--"),
)

_DOT_COLORS = {"original": C_DEMAND, "shifted": C_DEMAND_SHIFTED}


def set_theme(theme: str) -> None:
    """Switch the module-level colour shortcuts to *theme*."""
    global C_BG, C_AX, C_GRID, C_TICK, C_SPINE, C_TEXT, C_LEGEND
    p = _DARK_GRAPH if theme == "dark" else _LIGHT_GRAPH
    C_BG, C_AX, C_GRID = p["C_BG"], p["C_AX"], p["C_GRID"]
    C_TICK, C_SPINE, C_TEXT = p["C_TICK"], p["C_SPINE"], p["C_TEXT"]
    C_LEGEND = p["C_LEGEND"]


def _style_axes(ax, fig):
    fig.patch.set_facecolor(C_BG)
    ax.set_facecolor(C_AX)
    ax.tick_params(colors=C_TICK, labelsize=9)
    ax.xaxis.label.set_color(C_TEXT)
    ax.yaxis.label.set_color(C_TEXT)
    ax.title.set_color(C_TEXT)
    for spine in ax.spines.values():
        spine.set_edgecolor(C_SPINE)
    ax.grid(True, color=C_GRID, linewidth=0.8, linestyle="--", alpha=0.7)


def text_figure(title: str, message: str) -> Figure:
    """A blank figure carrying only a title and a message."""
    fig = Figure(figsize=(7, 3.4), dpi=100)
    ax = fig.add_subplot(111)
    _style_axes(ax, fig)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.grid(False)
    ax.set_title(title, color=C_TEXT, fontsize=11)
    ax.text(0.5, 0.5, message, ha="center", va="center", wrap=True,
            color=C_TEXT, fontsize=9, transform=ax.transAxes)
    return fig


def build_figure(result) -> Figure:
    """
    Build and return a matplotlib Figure for a ``MarketResult``.

    When neither curve has a single drawable point a text figure explaining
    why is returned instead.
    """
    series = result.series
    drawn = []
    for attr, label, color, style in _CURVES:
        if style == "--" and not result.shifts_active:
            continue
        q, prices = curve_arrays(series, attr)
        if np.all(np.isnan(prices)):
            continue
        drawn.append((q, prices, label, color, style))

    if not drawn:
        return text_figure(
            "Supply and Demand",
            result.error or "Enter your equations to see the graph here.",
        )

    fig = Figure(figsize=(7, 3.8), dpi=100)
    ax = fig.add_subplot(111)
    _style_axes(ax, fig)

    for q, prices, label, color, style in drawn:
        ax.plot(q, prices, color=color, linewidth=2, linestyle=style, label=label)

    for dot in result.equilibrium_dots():
        color = _DOT_COLORS[dot["kind"]]
        ax.scatter([dot["quantity"]], [dot["price"]], color=color, s=60,
                   edgecolors="white", linewidths=1.5, zorder=5)
        ax.annotate(dot["label"], (dot["quantity"], dot["price"]),
                    xytext=(8, 8), textcoords="offset points",
                    color=C_TEXT, fontsize=10, fontweight="bold")

    ax.set_xlim(0, result.quantity_max)
    ax.set_ylim(bottom=0)
    ax.set_xlabel("Quantity (Q)", color=C_TEXT)
    ax.set_ylabel("Price (P)", color=C_TEXT)

    if result.original is not None:
        title = (f"Equilibrium: P = {result.original.price:.2f}, "
                 f"Q = {result.original.quantity:.2f}")
    elif result.error:
        title = result.error
    else:
        title = "No valid equilibrium"
    ax.set_title(title, color=C_TEXT, fontsize=9, wrap=True)

    ax.legend(fontsize=8, facecolor=C_LEGEND, edgecolor=C_SPINE,
              labelcolor=C_TEXT)
    fig.tight_layout(pad=1.2)
    return fig

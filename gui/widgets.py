"""
MarketSolver — Widget helpers, table and graph panels

Reusable rendering primitives (section headers, cards, labelled inputs),
the development table and the embedded matplotlib chart.
"""

import tkinter as tk
from tkinter import ttk

from gui import themes

TABLE_COLUMNS = (
    ("quantity", "Quantity (Q)"),
    ("demand", "Original demand price"),
    ("supply", "Original supply price"),
    ("shifted_demand", "New demand price"),
    ("shifted_supply", "New supply price"),
)


class WidgetMixin:
    """Mixed into MarketSolverApp — UI building blocks."""

    # ── Section headers ────────────────────────────────────────────────

    def _render_section_header(self, parent: tk.Frame, title: str,
                               icon: str = "", bg: str | None = None) -> None:
        _bg = bg or themes.CARD_BG
        header = tk.Frame(parent, bg=_bg)
        header.pack(fill=tk.X, pady=(14, 4))
        label_text = f"{icon}  {title}" if icon else title
        tk.Label(header, text=label_text, font=self._bold,
                 bg=_bg, fg=themes.ACCENT, anchor="w").pack(fill=tk.X)
        tk.Frame(header, bg=themes.ACCENT, height=1).pack(fill=tk.X, pady=(2, 0))

    # ── Card wrapper ───────────────────────────────────────────────────

    def _make_card(self, parent: tk.Frame, bg: str) -> tk.Frame:
        wrapper = tk.Frame(parent, bg=themes.CARD_BORDER, padx=1, pady=1)
        wrapper.pack(fill=tk.X, pady=4)
        card = tk.Frame(wrapper, bg=bg, padx=14, pady=10)
        card.pack(fill=tk.X)
        return card

    # ── Labelled input ─────────────────────────────────────────────────

    def _labeled_entry(self, parent: tk.Frame, label: str,
                       var: tk.StringVar) -> tk.Entry:
        row = tk.Frame(parent, bg=themes.CARD_BG)
        row.pack(fill=tk.X, pady=(6, 0))
        tk.Label(row, text=label, font=self._small, bg=themes.CARD_BG,
                 fg=themes.TEXT, anchor="w").pack(fill=tk.X)
        border = tk.Frame(row, bg=themes.INPUT_BG,
                          highlightbackground=themes.INPUT_BORDER,
                          highlightthickness=1)
        border.pack(fill=tk.X, pady=(2, 0))
        entry = tk.Entry(
            border, font=self._mono, bg=themes.INPUT_BG,
            fg=themes.TEXT_BRIGHT, insertbackground=themes.TEXT_BRIGHT,
            bd=0, relief=tk.FLAT, textvariable=var,
        )
        entry.pack(fill=tk.X, padx=8, pady=6)
        return entry

    def _flat_button(self, parent: tk.Frame, text: str, bg: str,
                     hover: str, command) -> tk.Button:
        btn = tk.Button(
            parent, text=text, font=self._bold,
            bg=bg, fg="#ffffff",
            activebackground=hover, activeforeground="#ffffff",
            disabledforeground="#dddddd",
            bd=0, padx=16, pady=6, cursor="hand2", relief=tk.FLAT,
            command=command,
        )
        btn.pack(fill=tk.X, pady=(8, 0))
        return btn

    # ── Derivation steps ───────────────────────────────────────────────

    def _render_steps(self, parent: tk.Frame, title: str,
                      steps: list[dict]) -> None:
        """Render a derivation as numbered step cards."""
        self._render_section_header(parent, title, "Σ")
        for num, step in enumerate(steps, start=1):
            card = self._make_card(parent, themes.CARD_BG)
            tk.Label(card, text=f"Step {num}: {step['description']}",
                     font=self._bold, bg=themes.CARD_BG, fg=themes.TEXT_BRIGHT,
                     anchor="w").pack(fill=tk.X)
            tk.Label(card, text=step["expression"], font=self._mono,
                     bg=themes.CARD_BG, fg=themes.ACCENT, anchor="w"
                     ).pack(fill=tk.X, pady=(2, 0))
            tk.Label(card, text=step["explanation"], font=self._small,
                     bg=themes.CARD_BG, fg=themes.TEXT_DIM, anchor="w",
                     justify=tk.LEFT, wraplength=420).pack(fill=tk.X, pady=(2, 0))

    # ── Development table ──────────────────────────────────────────────

    def _render_table(self, parent: tk.Frame, rows) -> ttk.Treeview:
        """Quantity vs. price table; equilibrium rows are highlighted."""
        p = themes.palette(self._theme)
        tree = ttk.Treeview(parent, columns=[c for c, _ in TABLE_COLUMNS],
                            show="headings", height=min(len(rows), 12))
        for col, heading in TABLE_COLUMNS:
            tree.heading(col, text=heading)
            tree.column(col, anchor="center", width=90, stretch=True)
        tree.tag_configure("original", background=p["ROW_ORIGINAL"])
        tree.tag_configure("shifted", background=p["ROW_SHIFTED"])
        for row in rows:
            tags = (row.highlight,) if row.highlight else ()
            tree.insert("", tk.END, values=row.cells, tags=tags)
        tree.pack(fill=tk.X, pady=(4, 0))
        tk.Label(
            parent,
            text=("Yellow row: original equilibrium.  "
                  "Orange row: new equilibrium."),
            font=self._small, bg=p["TABLE_BG"], fg=themes.TEXT_DIM,
        ).pack(pady=(4, 0))
        return tree

    # ── Graph panel ────────────────────────────────────────────────────

    def _render_graph(self, parent: tk.Frame, result) -> None:
        """Replace the chart in *parent* with one built for *result*."""
        from market.graph import build_figure
        self._embed_figure(parent, build_figure(result))

    def _render_message_graph(self, parent: tk.Frame, message: str) -> None:
        """Replace the chart in *parent* with a message-only figure."""
        from market.graph import text_figure
        self._embed_figure(parent, text_figure("Supply and Demand", message))

    def _embed_figure(self, parent: tk.Frame, fig) -> None:
        from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

        for child in parent.winfo_children():
            child.destroy()
        canvas = FigureCanvasTkAgg(fig, master=parent)
        canvas.draw()
        widget = canvas.get_tk_widget()
        widget.configure(bg=themes.CARD_BG, highlightthickness=0)
        widget.pack(fill=tk.BOTH, expand=True, padx=2, pady=(8, 4))
        self._graph_panel = (fig, canvas, widget)

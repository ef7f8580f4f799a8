"""
MarketSolver — Tkinter GUI

An interactive supply & demand calculator.  Every keystroke in one of the
four inputs recomputes the whole market; the chart, results card and
development table are redrawn from the fresh result.
"""

import threading
import tkinter as tk
from tkinter import font as tkfont

from market import compute_market, parse_shift
from market import graph
from market.config import get_settings
from market.explain import can_explain, request_explanation
from market.logger import get_logger

# ── Theme data (palettes, mutable colour shortcuts) ────────────────────────
from gui import themes

# ── Mixin classes (each in its own module) ─────────────────────────────────
from gui.widgets import WidgetMixin
from gui.export import ExportMixin

logger = get_logger(__name__)

DEFAULT_DEMAND = "-P + 16"
DEFAULT_SUPPLY = "P + 4"

EXPLAIN_LABEL = "Explain equilibrium ✨"
EXPLAIN_BUSY_LABEL = "Generating explanation…"


class MarketSolverApp(
    WidgetMixin,
    ExportMixin,
    tk.Tk,
):
    """Main application window."""

    def __init__(self) -> None:
        super().__init__()
        self._settings = get_settings()
        self._theme: str = self._settings["theme"]
        themes.apply_theme(self._theme)
        graph.set_theme(self._theme)

        self.title("MarketSolver — Supply & Demand Calculator")
        self.geometry("1280x820")
        self.minsize(900, 600)
        self.configure(bg=themes.BG)

        # ── Fonts ────────────────────────────────────────────────────
        self._default = tkfont.Font(family="Segoe UI", size=12)
        self._bold    = tkfont.Font(family="Segoe UI", size=12, weight="bold")
        self._title   = tkfont.Font(family="Segoe UI", size=20, weight="bold")
        self._mono    = tkfont.Font(family="Consolas", size=13)
        self._small   = tkfont.Font(family="Segoe UI", size=10)

        # ── Inputs ───────────────────────────────────────────────────
        self._demand_var = tk.StringVar(value=DEFAULT_DEMAND)
        self._supply_var = tk.StringVar(value=DEFAULT_SUPPLY)
        self._demand_shift_var = tk.StringVar(value="0")
        self._supply_shift_var = tk.StringVar(value="0")

        self._result = None
        self._graph_panel = None
        self._show_table: bool = False
        self._explanation: str = ""
        self._explaining: bool = False
        self._explain_gen: int = 0
        self._input_error: str = ""

        self._build_ui()
        for var in (self._demand_var, self._supply_var,
                    self._demand_shift_var, self._supply_shift_var):
            var.trace_add("write", self._on_input_change)
        self._recompute()

    # ── UI construction ─────────────────────────────────────────────────

    def _build_ui(self) -> None:
        p = themes.palette(self._theme)
        self._content = tk.Frame(self, bg=p["BG"])
        self._content.pack(fill=tk.BOTH, expand=True)

        # header
        self._header = tk.Frame(self._content, bg=p["HEADER_BG"], height=72)
        self._header.pack(fill=tk.X)
        self._header.pack_propagate(False)
        tk.Label(self._header, text="Supply & Demand Calculator",
                 font=self._title, bg=p["HEADER_BG"], fg=p["ACCENT"]
                 ).pack(side=tk.LEFT, padx=20)
        self._theme_btn = tk.Button(
            self._header,
            text="🌙 Dark" if self._theme == "light" else "☀ Light",
            font=self._small, bg=p["HEADER_BG"], fg=p["TEXT_DIM"],
            activebackground=p["HEADER_BG"], activeforeground=p["TEXT_BRIGHT"],
            bd=0, padx=12, pady=6, cursor="hand2", relief=tk.FLAT,
            highlightthickness=1, highlightbackground=p["CARD_BORDER"],
            command=self._toggle_theme,
        )
        self._theme_btn.pack(side=tk.RIGHT, padx=20)

        body = tk.Frame(self._content, bg=p["BG"])
        body.pack(fill=tk.BOTH, expand=True, padx=16, pady=16)

        # left column: inputs, results, explanation, table (scrollable)
        left_outer = tk.Frame(body, bg=p["CARD_BORDER"], padx=1, pady=1)
        left_outer.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(0, 8))
        self._left_canvas = tk.Canvas(left_outer, bg=p["CARD_BG"],
                                      highlightthickness=0)
        self._left_canvas.pack(fill=tk.BOTH, expand=True)
        self._left = tk.Frame(self._left_canvas, bg=p["CARD_BG"], padx=18, pady=12)
        self._left_window = self._left_canvas.create_window(
            (0, 0), window=self._left, anchor="nw")
        self._left.bind("<Configure>", lambda _: self._left_canvas.configure(
            scrollregion=self._left_canvas.bbox("all")))
        self._left_canvas.bind("<Configure>", lambda e: self._left_canvas.itemconfig(
            self._left_window, width=e.width))
        self._left_canvas.bind_all("<MouseWheel>", self._on_mousewheel)

        tk.Label(self._left, text="Applications of economic science",
                 font=self._small, bg=p["CARD_BG"], fg=p["TEXT_DIM"]
                 ).pack(fill=tk.X)

        self._labeled_entry(self._left, "Demand equation (e.g. -P + 16):",
                            self._demand_var).focus_set()
        self._labeled_entry(self._left, "Supply equation (e.g. P + 4):",
                            self._supply_var)
        shifts = tk.Frame(self._left, bg=p["CARD_BG"])
        shifts.pack(fill=tk.X)
        col_d = tk.Frame(shifts, bg=p["CARD_BG"])
        col_d.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=(0, 6))
        col_s = tk.Frame(shifts, bg=p["CARD_BG"])
        col_s.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=(6, 0))
        self._labeled_entry(col_d, "Demand shift (+/-):", self._demand_shift_var)
        self._labeled_entry(col_s, "Supply shift (+/-):", self._supply_shift_var)

        self._error_frame = tk.Frame(self._left, bg=p["ERROR_BG"], padx=12, pady=8)
        self._error_label = tk.Label(
            self._error_frame, text="", font=self._default, bg=p["ERROR_BG"],
            fg=p["ERROR"], anchor="w", justify=tk.LEFT, wraplength=460)
        self._error_label.pack(fill=tk.X)

        self._results = tk.Frame(self._left, bg=p["CARD_BG"])
        self._results.pack(fill=tk.X, pady=(12, 0))

        # right column: chart
        right_outer = tk.Frame(body, bg=p["CARD_BORDER"], padx=1, pady=1)
        right_outer.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(8, 0))
        right = tk.Frame(right_outer, bg=p["CARD_BG"], padx=12, pady=12)
        right.pack(fill=tk.BOTH, expand=True)
        tk.Label(right, text="Supply and Demand Graph", font=self._bold,
                 bg=p["CARD_BG"], fg=p["TEXT_BRIGHT"]).pack()
        self._graph_frame = tk.Frame(right, bg=p["CARD_BG"])
        self._graph_frame.pack(fill=tk.BOTH, expand=True)

    def _on_mousewheel(self, event: tk.Event) -> None:
        self._left_canvas.yview_scroll(int(-event.delta / 120), "units")

    # ── Theme ────────────────────────────────────────────────────────────

    def _toggle_theme(self) -> None:
        self._theme = "light" if self._theme == "dark" else "dark"
        themes.apply_theme(self._theme)
        graph.set_theme(self._theme)
        self._content.destroy()
        self._build_ui()
        self.configure(bg=themes.BG)
        if self._result is None and self._input_error:
            self._clear_result(self._input_error)
        else:
            self._render_result(self._result)

    # ── Recompute ───────────────────────────────────────────────────────

    def _on_input_change(self, *_args) -> None:
        self._recompute()

    def _read_shifts(self) -> tuple[float, float]:
        try:
            demand_shift = parse_shift(self._demand_shift_var.get())
        except ValueError as exc:
            raise ValueError(f"Demand shift: {exc}")
        try:
            supply_shift = parse_shift(self._supply_shift_var.get())
        except ValueError as exc:
            raise ValueError(f"Supply shift: {exc}")
        return demand_shift, supply_shift

    def _recompute(self) -> None:
        """Recompute the whole market from the current inputs."""
        # A reply to an older explanation request no longer matches the inputs
        self._explain_gen += 1
        self._explanation = ""
        self._show_table = False
        try:
            demand_shift, supply_shift = self._read_shifts()
            result = compute_market(self._demand_var.get(),
                                    self._supply_var.get(),
                                    demand_shift, supply_shift)
        except ValueError as exc:
            self._clear_result(str(exc))
            return
        except Exception as exc:
            logger.exception("Unexpected failure while computing the market")
            self._clear_result(self._friendly_error(exc))
            return
        self._input_error = ""
        self._result = result
        self._render_result(result)

    def _clear_result(self, message: str) -> None:
        """Drop the previous result so nothing stale stays on screen."""
        self._result = None
        self._input_error = message
        self._show_error(message)
        for child in self._results.winfo_children():
            child.destroy()
        self._render_message_graph(self._graph_frame, message)

    @staticmethod
    def _friendly_error(exc: Exception) -> str:
        msg = str(exc)
        if isinstance(exc, ValueError):
            return msg
        return (
            "MarketSolver could not process these inputs.\n\n"
            "Enter linear equations in P such as  -P + 16  or  50 - 3P,\n"
            "and numeric shifts such as  4  or  -2.5.\n\n"
            f"Details: {msg}"
        )

    def _show_error(self, message: str) -> None:
        self._error_label.configure(text=f"Error!  {message}")
        if not self._error_frame.winfo_ismapped():
            self._error_frame.pack(fill=tk.X, pady=(12, 0), before=self._results)

    def _hide_error(self) -> None:
        self._error_label.configure(text="")
        self._error_frame.pack_forget()

    # ── Rendering ───────────────────────────────────────────────────────

    def _render_result(self, result) -> None:
        if result is None:
            return
        p = themes.palette(self._theme)
        if result.error:
            self._show_error(result.error)
        else:
            self._hide_error()

        for child in self._results.winfo_children():
            child.destroy()

        if result.original or result.shifted or result.error:
            card = self._make_card(self._results, p["RESULT_BG"])
            tk.Label(card, text="Equilibrium results", font=self._bold,
                     bg=p["RESULT_BG"], fg=p["TEXT_BRIGHT"], anchor="w"
                     ).pack(fill=tk.X)
            if result.original is not None:
                self._result_line(card, "Equilibrium price", result.original.price)
                self._result_line(card, "Equilibrium quantity", result.original.quantity)
            else:
                self._note(card, "No valid original equilibrium was found.")
            if result.display_shifted is not None:
                tk.Label(card, text="After shifts", font=self._bold,
                         bg=p["RESULT_BG"], fg=p["TEXT_BRIGHT"], anchor="w"
                         ).pack(fill=tk.X, pady=(8, 0))
                self._result_line(card, "New equilibrium price",
                                  result.display_shifted.price)
                self._result_line(card, "New equilibrium quantity",
                                  result.display_shifted.quantity)
            elif result.shifts_active:
                self._note(card, "No valid new equilibrium was found after the shifts.")

            self._explain_btn = self._flat_button(
                card, EXPLAIN_BUSY_LABEL if self._explaining else EXPLAIN_LABEL,
                p["EXPLAIN"], p["EXPLAIN_HOVER"], self._on_explain)
            if self._explaining or not can_explain(result):
                self._explain_btn.configure(state=tk.DISABLED)
            self._table_btn = self._flat_button(
                card,
                "Hide development table" if self._show_table else "Show development table",
                p["NEUTRAL"], p["NEUTRAL_HOVER"], self._toggle_table)

            actions = tk.Frame(card, bg=p["RESULT_BG"])
            actions.pack(fill=tk.X, pady=(8, 0))
            copy_btn = tk.Button(
                actions, text="📋 Copy to Clipboard", font=self._small,
                bg=p["CARD_BG"], fg=p["TEXT_BRIGHT"],
                activebackground=p["ACCENT"], activeforeground="#ffffff",
                bd=0, padx=12, pady=4, cursor="hand2", relief=tk.FLAT,
            )
            copy_btn.configure(command=lambda b=copy_btn: self._copy_to_clipboard(b))
            copy_btn.pack(side=tk.LEFT, padx=(0, 8))
            tk.Button(
                actions, text="📄 Save as PDF", font=self._small,
                bg=p["CARD_BG"], fg=p["TEXT_BRIGHT"],
                activebackground=p["ACCENT"], activeforeground="#ffffff",
                bd=0, padx=12, pady=4, cursor="hand2", relief=tk.FLAT,
                command=self._save_as_pdf,
            ).pack(side=tk.LEFT)

        if self._explaining:
            self._note(self._results, "Loading explanation…")
        elif self._explanation:
            exp = self._make_card(self._results, p["EXPLAIN_BG"])
            tk.Label(exp, text="Equilibrium explanation", font=self._bold,
                     bg=p["EXPLAIN_BG"], fg=p["TEXT_BRIGHT"], anchor="w"
                     ).pack(fill=tk.X)
            tk.Label(exp, text=self._explanation, font=self._default,
                     bg=p["EXPLAIN_BG"], fg=p["TEXT"], anchor="w",
                     justify=tk.LEFT, wraplength=460).pack(fill=tk.X, pady=(4, 0))

        if self._show_table and result.table:
            table = tk.Frame(self._results, bg=p["TABLE_BG"], padx=8, pady=8)
            table.pack(fill=tk.X, pady=(8, 0))
            tk.Label(table, text="Development table (quantities vs. prices)",
                     font=self._bold, bg=p["TABLE_BG"], fg=p["TEXT_BRIGHT"]).pack()
            self._render_table(table, result.table)

        if result.steps.get("original"):
            self._render_steps(self._results, "HOW THE EQUILIBRIUM IS FOUND",
                               result.steps["original"])
        if result.shifts_active and result.steps.get("shifted"):
            self._render_steps(self._results, "AFTER THE SHIFTS",
                               result.steps["shifted"])

        self._render_graph(self._graph_frame, result)

    def _result_line(self, parent: tk.Frame, label: str, value: float) -> None:
        p = themes.palette(self._theme)
        row = tk.Frame(parent, bg=p["RESULT_BG"])
        row.pack(fill=tk.X)
        tk.Label(row, text=f"{label}:", font=self._bold, bg=p["RESULT_BG"],
                 fg=p["TEXT"]).pack(side=tk.LEFT)
        tk.Label(row, text=f"{value:.2f}", font=self._mono, bg=p["RESULT_BG"],
                 fg=p["ACCENT"]).pack(side=tk.LEFT, padx=(6, 0))

    def _note(self, parent: tk.Frame, text: str) -> None:
        bg = parent.cget("bg")
        tk.Label(parent, text=text, font=self._default, bg=bg,
                 fg=themes.TEXT_DIM, anchor="w", justify=tk.LEFT,
                 wraplength=460).pack(fill=tk.X, pady=(4, 0))

    # ── Table toggle ────────────────────────────────────────────────────

    def _toggle_table(self) -> None:
        self._show_table = not self._show_table
        self._render_result(self._result)

    # ── Explanation ─────────────────────────────────────────────────────

    def _on_explain(self) -> None:
        result = self._result
        if result is None or self._explaining or not can_explain(result):
            return
        self._explaining = True
        self._explanation = ""
        self._render_result(result)

        gen = self._explain_gen
        settings = self._settings

        def _work():
            text = request_explanation(result, settings)
            self.after(0, lambda: self._show_explanation(text, gen))

        threading.Thread(target=_work, daemon=True).start()

    def _show_explanation(self, text: str, gen: int) -> None:
        self._explaining = False
        if gen == self._explain_gen:
            self._explanation = text
        self._render_result(self._result)


def main() -> None:
    app = MarketSolverApp()
    app.mainloop()


if __name__ == "__main__":
    main()

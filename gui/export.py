"""
MarketSolver — Export / clipboard mixin

Provides PDF export (with embedded graph) and plain-text clipboard copy.
"""

import os
import re
import tempfile
import tkinter as tk
from tkinter import filedialog, messagebox

from market.graph import build_figure
from market.logger import get_logger
from market.series import NOT_AVAILABLE
from gui.widgets import TABLE_COLUMNS

logger = get_logger(__name__)

_WIN_FONTS = os.path.join(os.environ.get("WINDIR", r"C:\Windows"), "Fonts")
_DEJAVU = "/usr/share/fonts/truetype/dejavu"

# (family, regular, bold, mono family, mono); first complete set wins
_FONT_CANDIDATES = (
    ("Arial",
     os.path.join(_WIN_FONTS, "arial.ttf"),
     os.path.join(_WIN_FONTS, "arialbd.ttf"),
     "Consolas",
     os.path.join(_WIN_FONTS, "consola.ttf")),
    ("DejaVu",
     os.path.join(_DEJAVU, "DejaVuSans.ttf"),
     os.path.join(_DEJAVU, "DejaVuSans-Bold.ttf"),
     "DejaVuMono",
     os.path.join(_DEJAVU, "DejaVuSansMono.ttf")),
)


def _point_lines(title: str, point) -> list[str]:
    if point is None:
        return [f"  {title}: none"]
    return [f"  {title}:",
            f"    Price:    {point.price:.2f}",
            f"    Quantity: {point.quantity:.2f}"]


class ExportMixin:
    """Mixed into MarketSolverApp — adds copy-to-clipboard and PDF export."""

    # ── Plain-text builder (clipboard) ─────────────────────────────────

    @staticmethod
    def _build_plain_text(result) -> str:
        """Convert a ``MarketResult`` into a readable plain-text report."""
        lines: list[str] = []
        lines.append("=" * 56)
        lines.append("  MarketSolver — Supply & Demand Report")
        lines.append("=" * 56)

        lines.append("\n── GIVEN ──────────────────────────────────")
        lines.append(f"  Demand (Qd): {result.demand_equation}")
        lines.append(f"  Supply (Qs): {result.supply_equation}")
        lines.append(f"  Demand shift: {result.demand_shift:g}")
        lines.append(f"  Supply shift: {result.supply_shift:g}")

        lines.append("\n── EQUILIBRIUM ────────────────────────────")
        lines += _point_lines("Original", result.original)
        if result.shifts_active:
            lines += _point_lines("After shifts", result.display_shifted)
        if result.error:
            lines.append(f"\n  Error: {result.error}")

        for key, title in (("original", "STEPS"), ("shifted", "STEPS AFTER SHIFTS")):
            steps = result.steps.get(key)
            if not steps:
                continue
            lines.append(f"\n── {title} " + "─" * max(4, 39 - len(title)))
            for num, step in enumerate(steps, start=1):
                lines.append(f"\n  Step {num}: {step['description']}")
                lines.append(f"    {step['expression']}")
                lines.append(f"    → {step['explanation']}")

        if result.table:
            lines.append("\n── DEVELOPMENT TABLE ──────────────────────")
            header = " | ".join(h for _, h in TABLE_COLUMNS)
            lines.append(f"  {header}")
            for row in result.table:
                mark = {"original": "  *E0", "shifted": "  *E1"}.get(row.highlight, "")
                lines.append("  " + " | ".join(row.cells) + mark)

        lines.append("\n" + "=" * 56)
        return "\n".join(lines)

    # ── Clipboard ──────────────────────────────────────────────────────

    def _copy_to_clipboard(self, btn: tk.Button) -> None:
        """Copy the current report as plain text to the clipboard."""
        if self._result is None:
            return
        text = self._build_plain_text(self._result)
        self.clipboard_clear()
        self.clipboard_append(text)
        original = btn.cget("text")
        btn.configure(text="✓ Copied!")
        self.after(1500, lambda: btn.configure(text=original))

    # ── PDF export ─────────────────────────────────────────────────────

    @staticmethod
    def _safe_filename(equation: str) -> str:
        safe = re.sub(r'[<>:"/\\|?*]', '', equation)[:50].strip()
        return re.sub(r'\s+', '', safe)

    @staticmethod
    def _pdf_safe(text: str, unicode_fonts: bool = True) -> str:
        """Replace glyphs missing from the PDF fonts.

        The core fonts only cover Latin-1; anything else becomes ``?``.
        """
        text = (
            text
            .replace('·', '*')     # ·
            .replace('→', '->')    # →
            .replace('—', '-')     # —
            .replace('−', '-')     # −
            .replace('✓', 'OK')    # ✓
        )
        if not unicode_fonts:
            text = text.encode("latin-1", "replace").decode("latin-1")
        return text

    @staticmethod
    def _register_fonts(pdf) -> tuple[str, str, bool]:
        """Register the first available TTF family; fall back to core fonts.

        Returns ``(font, mono, unicode_fonts)``.
        """
        for family, regular, bold, mono_family, mono in _FONT_CANDIDATES:
            if not all(os.path.isfile(p) for p in (regular, bold, mono)):
                continue
            try:
                pdf.add_font(family, "", regular)
                pdf.add_font(family, "B", bold)
                pdf.add_font(mono_family, "", mono)
            except (OSError, RuntimeError) as exc:
                logger.warning(f"Could not register font {family}: {exc}")
                continue
            return family, mono_family, True
        return "Helvetica", "Courier", False

    def _save_as_pdf(self) -> None:
        """Export the current report as a PDF with the graph embedded."""
        result = self._result
        if result is None:
            return
        safe_name = self._safe_filename(
            f"{result.demand_equation}_{result.supply_equation}")
        path = filedialog.asksaveasfilename(
            title="Save Report as PDF",
            defaultextension=".pdf",
            initialfile=f"MarketSolver_{safe_name}",
            filetypes=[("PDF files", "*.pdf"), ("All files", "*.*")],
        )
        if not path:
            return

        from fpdf import FPDF

        graph_img_path = None
        try:
            pdf = FPDF()
            pdf.set_auto_page_break(auto=True, margin=20)
            pdf.add_page()
            _font, _mono, unicode_fonts = self._register_fonts(pdf)

            def safe(text: str) -> str:
                return self._pdf_safe(text, unicode_fonts)

            pdf.set_font(_font, "B", 20)
            pdf.set_text_color(15, 76, 117)
            pdf.cell(0, 12, "MarketSolver - Supply & Demand Report",
                     new_x="LMARGIN", new_y="NEXT")
            pdf.set_draw_color(15, 76, 117)
            pdf.line(10, pdf.get_y(), 200, pdf.get_y())
            pdf.ln(6)

            def _section(title: str) -> None:
                pdf.ln(4)
                pdf.set_font(_font, "B", 13)
                pdf.set_text_color(15, 76, 117)
                pdf.cell(0, 8, safe(title), new_x="LMARGIN", new_y="NEXT")
                pdf.line(10, pdf.get_y(), 200, pdf.get_y())
                pdf.ln(3)

            def _body(text: str, bold: bool = False, size: int = 10,
                      color: tuple = (30, 30, 30)) -> None:
                pdf.set_font(_font, "B" if bold else "", size)
                pdf.set_text_color(*color)
                pdf.multi_cell(0, 6, safe(text), new_x="LMARGIN", new_y="NEXT")

            def _mono_text(text: str, size: int = 10) -> None:
                pdf.set_font(_mono, "", size)
                pdf.set_text_color(30, 30, 30)
                pdf.multi_cell(0, 6, safe(text), new_x="LMARGIN", new_y="NEXT")

            _section("GIVEN")
            _mono_text(f"Demand (Qd): {result.demand_equation}")
            _mono_text(f"Supply (Qs): {result.supply_equation}")
            _mono_text(f"Demand shift: {result.demand_shift:g}")
            _mono_text(f"Supply shift: {result.supply_shift:g}")

            _section("EQUILIBRIUM")
            for line in _point_lines("Original", result.original):
                _mono_text(line)
            if result.shifts_active:
                for line in _point_lines("After shifts", result.display_shifted):
                    _mono_text(line)
            if result.error:
                _body(f"Error: {result.error}", bold=True, color=(198, 40, 40))

            for key, title in (("original", "STEPS"), ("shifted", "STEPS AFTER SHIFTS")):
                steps = result.steps.get(key)
                if not steps:
                    continue
                _section(title)
                for num, step in enumerate(steps, start=1):
                    pdf.ln(2)
                    _body(f"Step {num}: {step['description']}", bold=True)
                    _mono_text(f"    {step['expression']}")
                    pdf.set_font(_font, "", 9)
                    pdf.set_text_color(100, 100, 100)
                    pdf.multi_cell(0, 5, safe(f"    {step['explanation']}"),
                                   new_x="LMARGIN", new_y="NEXT")

            fig = build_figure(result)
            tmp = tempfile.NamedTemporaryFile(suffix=".png", delete=False)
            tmp.close()
            graph_img_path = tmp.name
            fig.savefig(graph_img_path, dpi=150, bbox_inches="tight",
                        facecolor="#ffffff", edgecolor="none")
            _section("GRAPH")
            pdf.image(graph_img_path, x=10, w=pdf.w - 20)
            pdf.ln(4)

            if result.table:
                _section("DEVELOPMENT TABLE")
                col_w = (pdf.w - 20) / len(TABLE_COLUMNS)
                pdf.set_font(_font, "B", 8)
                pdf.set_text_color(30, 30, 30)
                for _, heading in TABLE_COLUMNS:
                    pdf.cell(col_w, 6, heading, border=1, align="C")
                pdf.ln()
                pdf.set_font(_mono, "", 8)
                for row in result.table:
                    fill = row.highlight is not None
                    if row.highlight == "shifted":
                        pdf.set_fill_color(255, 237, 213)
                    elif row.highlight == "original":
                        pdf.set_fill_color(254, 249, 195)
                    for cell in row.cells:
                        pdf.cell(col_w, 5, cell or NOT_AVAILABLE, border=1,
                                 align="C", fill=fill)
                    pdf.ln()

            pdf.output(path)
        except Exception as exc:
            logger.error(f"Could not save PDF to {path}: {exc}")
            messagebox.showerror("Export error", f"Could not save PDF:\n{exc}")
        finally:
            if graph_img_path:
                try:
                    os.remove(graph_img_path)
                except OSError:
                    pass

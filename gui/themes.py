"""
MarketSolver — Colour / theme definitions

Immutable palette dicts and mutable module-level shortcuts that are updated
by ``apply_theme()`` whenever the user toggles between light and dark mode.
"""

# ── Immutable palette dicts ────────────────────────────────────────────────

LIGHT_PALETTE = dict(
    BG           = "#f2f4f7",
    HEADER_BG    = "#ffffff",
    CARD_BG      = "#ffffff",
    CARD_BORDER  = "#dde2ea",
    ACCENT       = "#0F4C75",
    ACCENT_HOVER = "#0a3a5c",
    EXPLAIN      = "#8b5cf6",
    EXPLAIN_HOVER= "#7c3aed",
    NEUTRAL      = "#6b7280",
    NEUTRAL_HOVER= "#4b5563",
    TEXT         = "#444444",
    TEXT_DIM     = "#6b7280",
    TEXT_BRIGHT  = "#111111",
    SUCCESS      = "#2e7d32",
    ERROR        = "#c62828",
    ERROR_BG     = "#fee2e2",
    INPUT_BG     = "#ffffff",
    INPUT_BORDER = "#c5ccd6",
    RESULT_BG    = "#eef6ff",
    EXPLAIN_BG   = "#f5f3ff",
    TABLE_BG     = "#eff6ff",
    ROW_ORIGINAL = "#fef9c3",
    ROW_SHIFTED  = "#ffedd5",
)

DARK_PALETTE = dict(
    BG           = "#0a0a0a",
    HEADER_BG    = "#111111",
    CARD_BG      = "#121212",
    CARD_BORDER  = "#2a2a2a",
    ACCENT       = "#1a8cff",
    ACCENT_HOVER = "#0a70d4",
    EXPLAIN      = "#8b5cf6",
    EXPLAIN_HOVER= "#7c3aed",
    NEUTRAL      = "#3a3a3a",
    NEUTRAL_HOVER= "#4a4a4a",
    TEXT         = "#d0d0d0",
    TEXT_DIM     = "#9a9a9a",
    TEXT_BRIGHT  = "#f0f0f0",
    SUCCESS      = "#4caf50",
    ERROR        = "#ff5555",
    ERROR_BG     = "#2a1212",
    INPUT_BG     = "#181818",
    INPUT_BORDER = "#2a2a2a",
    RESULT_BG    = "#0f1a24",
    EXPLAIN_BG   = "#1a1526",
    TABLE_BG     = "#101820",
    ROW_ORIGINAL = "#3d3a12",
    ROW_SHIFTED  = "#42260f",
)

# ── Mutable "active" colour shortcuts ─────────────────────────────────────
# These start with light-mode values and are refreshed by ``apply_theme()``.

BG           = LIGHT_PALETTE["BG"]
HEADER_BG    = LIGHT_PALETTE["HEADER_BG"]
CARD_BG      = LIGHT_PALETTE["CARD_BG"]
CARD_BORDER  = LIGHT_PALETTE["CARD_BORDER"]
ACCENT       = LIGHT_PALETTE["ACCENT"]
ACCENT_HOVER = LIGHT_PALETTE["ACCENT_HOVER"]
TEXT         = LIGHT_PALETTE["TEXT"]
TEXT_DIM     = LIGHT_PALETTE["TEXT_DIM"]
TEXT_BRIGHT  = LIGHT_PALETTE["TEXT_BRIGHT"]
SUCCESS      = LIGHT_PALETTE["SUCCESS"]
ERROR        = LIGHT_PALETTE["ERROR"]
INPUT_BG     = LIGHT_PALETTE["INPUT_BG"]
INPUT_BORDER = LIGHT_PALETTE["INPUT_BORDER"]


def palette(theme: str) -> dict:
    """Return the palette dict for *theme* (``"dark"`` or ``"light"``)."""
    return DARK_PALETTE if theme == "dark" else LIGHT_PALETTE


def apply_theme(theme: str) -> None:
    """Update the mutable module-level colour shortcuts for *theme*."""
    import sys
    p = palette(theme)
    mod = sys.modules[__name__]
    for k, v in p.items():
        if hasattr(mod, k):
            setattr(mod, k, v)

"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

The palette follows the blue/indigo look of the chatbot and keeps strong
contrast for readers with low vision.
"""

from textual.theme import Theme

INKLUSI_INDIGO = Theme(
    name="inklusi-indigo",
    primary="#2563eb",      # Blue 600 - header and user messages
    secondary="#6366f1",    # Indigo 500 - assistant messages
    accent="#f59e0b",       # Amber 500 - audio controls
    foreground="#e0e7ff",   # Indigo 100 - text
    background="#111827",   # Gray 900
    success="#10b981",      # Emerald 500
    warning="#f59e0b",
    error="#ef4444",        # Red 500 - error messages
    surface="#1e293b",      # Slate 800
    panel="#172033",
    dark=True,
    variables={
        "block-cursor-foreground": "#111827",
        "block-cursor-background": "#93c5fd",
        "block-cursor-text-style": "bold",
        "input-cursor-background": "#e0e7ff",
        "input-cursor-foreground": "#111827",
        "input-selection-background": "#2563eb 35%",

        "border": "#334155",
        "border-blurred": "#1e293b",

        "scrollbar": "#1e293b",
        "scrollbar-hover": "#334155",
        "scrollbar-active": "#2563eb",
        "scrollbar-background": "#172033",

        "footer-foreground": "#c7d2fe",
        "footer-background": "#111827",
        "footer-key-foreground": "#fbbf24",
        "footer-key-background": "#1e293b",

        "text-muted": "#94a3b8",
        "text-disabled": "#475569",

        "link-color": "#93c5fd",
        "link-style": "underline",
        "link-color-hover": "#bfdbfe",
        "link-style-hover": "bold",

        "button-foreground": "#e0e7ff",
        "button-color-foreground": "#111827",
        "button-focus-text-style": "bold reverse",
    },
)

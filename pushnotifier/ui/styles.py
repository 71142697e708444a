"""QSS stylesheet and status colours for Pushover Notifier."""

from __future__ import annotations

from ..timer.engine import CountdownState

# ── palette ───────────────────────────────────────────────────────────────

PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#89B4FA",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "success":      "#A6E3A1",
    "warning":      "#F9E2AF",
    "danger":       "#F38BA8",
    "border":       "#313154",
}

# Status label colour per controller state
STATE_COLORS: dict[CountdownState, str] = {
    CountdownState.IDLE:      PALETTE["accent"],
    CountdownState.RUNNING:   PALETTE["warning"],
    CountdownState.COMPLETED: PALETTE["success"],
    CountdownState.CANCELLED: PALETTE["text_muted"],
    CountdownState.FAILED:    PALETTE["danger"],
}


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    """Return the application-wide QSS for *palette*."""
    p = palette or PALETTE
    return f"""
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-size: 13px;
    }}

    /* ── inputs ──────────────────────────────────── */
    QLineEdit {{
        background-color: {p['surface']};
        border: 1px solid {p['border']};
        border-radius: 6px;
        padding: 6px 8px;
    }}

    QLineEdit:focus {{
        border: 1px solid {p['accent']};
    }}

    QLineEdit#durationInput {{
        font-size: 18px;
        font-weight: 700;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['surface']};
        border: 1px solid {p['border']};
        border-radius: 6px;
        padding: 6px 14px;
    }}

    QPushButton:hover {{
        border: 1px solid {p['accent']};
    }}

    QPushButton:disabled {{
        color: {p['text_muted']};
        border: 1px solid {p['bg_secondary']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        font-weight: 700;
    }}

    QPushButton#primaryButton:disabled {{
        background-color: {p['bg_secondary']};
        color: {p['text_muted']};
    }}

    QPushButton#dangerButton {{
        color: {p['danger']};
    }}

    QPushButton#presetButton {{
        min-width: 64px;
    }}

    /* ── frame / card ────────────────────────────── */
    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}

    /* ── labels ──────────────────────────────────── */
    QLabel#statusLabel {{
        font-size: 13px;
        font-weight: 600;
    }}
    """


def status_style(state: CountdownState) -> str:
    """Inline style for the status label in *state*."""
    return f"color: {STATE_COLORS.get(state, PALETTE['accent'])};"

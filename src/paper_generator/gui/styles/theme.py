"""
Theme definitions for the question paper generator GUI.
"""


class Colors:
    # Brand
    PRIMARY = "#0284C7"          # Sky blue
    PRIMARY_HOVER = "#0369A1"
    PRIMARY_PRESSED = "#075985"
    EXPORT = "#16A34A"           # Download PDF button
    EXPORT_HOVER = "#15803D"

    # Surfaces
    BACKGROUND = "#f5f5f5"
    SURFACE = "#ffffff"
    HOVER = "#f0f0f0"
    DISABLED_BG = "#e0e0e0"

    # Text
    TEXT_PRIMARY = "#1f1f1f"
    TEXT_SECONDARY = "#666666"
    TEXT_DISABLED = "#757575"
    TEXT_ON_PRIMARY = "#ffffff"

    # Lines
    BORDER = "#e0e0e0"
    BORDER_FOCUS = "#38BDF8"

    # Status
    ERROR = "#d32f2f"
    ERROR_BG = "#FDECEA"
    SUCCESS = "#388e3c"
    WARNING = "#f57c00"
    WARNING_BG = "#FFF4E5"
    INFO = "#1976d2"

    SELECTION_BG = "#E0F2FE"
    SELECTION_TEXT = "#1f1f1f"

    # The paper preview is always black on white, whatever the theme
    PAPER_BG = "#ffffff"
    PAPER_TEXT = "#000000"
    ANSWERS_ACCENT = "#B45309"   # Amber heading for the answer key


class ColorsDark:
    PRIMARY = "#38BDF8"
    PRIMARY_HOVER = "#7DD3FC"
    PRIMARY_PRESSED = "#0EA5E9"
    EXPORT = "#22C55E"
    EXPORT_HOVER = "#4ADE80"

    BACKGROUND = "#0F172A"       # Slate 900
    SURFACE = "#1E293B"          # Slate 800
    HOVER = "#334155"
    DISABLED_BG = "#475569"

    TEXT_PRIMARY = "#E2E8F0"
    TEXT_SECONDARY = "#94A3B8"
    TEXT_DISABLED = "#9CA3AF"
    TEXT_ON_PRIMARY = "#0F172A"

    BORDER = "#334155"
    BORDER_FOCUS = "#38BDF8"

    ERROR = "#F85149"
    ERROR_BG = "#3B1618"
    SUCCESS = "#3FB950"
    WARNING = "#D29922"
    WARNING_BG = "#3A2A0B"
    INFO = "#58A6FF"

    SELECTION_BG = "#0369A1"
    SELECTION_TEXT = "#FFFFFF"

    PAPER_BG = Colors.PAPER_BG
    PAPER_TEXT = Colors.PAPER_TEXT
    ANSWERS_ACCENT = "#FCD34D"


class Fonts:
    UI_FONT = "-apple-system, 'SF Pro Text', 'Segoe UI', Roboto, Helvetica, Arial, sans-serif"
    MONO_FONT = "Consolas, Monaco, Menlo, 'Courier New', monospace"
    # Paper preview uses a serif face like a printed exam
    PAPER_FONT = "'Times New Roman', Times, serif"

    TITLE = "20pt"
    HEADING = "15pt"
    BODY = "13pt"
    SMALL = "11pt"
    CONSOLE = "12pt"

    WEIGHT_MEDIUM = "500"
    WEIGHT_BOLD = "600"


def _button(bg: str, hover: str, pressed: str, fg: str, disabled_bg: str, disabled_fg: str) -> str:
    return f"""
        QPushButton {{
            background-color: {bg};
            color: {fg};
            border-radius: 6px;
            padding: 8px 16px;
            font-weight: {Fonts.WEIGHT_BOLD};
            border: none;
            qproperty-iconSize: 20px 20px;
        }}
        QPushButton:hover {{
            background-color: {hover};
        }}
        QPushButton:pressed {{
            background-color: {pressed};
        }}
        QPushButton:disabled {{
            background-color: {disabled_bg};
            color: {disabled_fg};
        }}
    """


def _inputs(C) -> str:
    return f"""
        QLineEdit, QSpinBox, QPlainTextEdit, QComboBox {{
            border: 1px solid {C.BORDER};
            border-radius: 6px;
            padding: 6px 8px;
            background: {C.SURFACE};
            color: {C.TEXT_PRIMARY};
            selection-background-color: {C.SELECTION_BG};
            selection-color: {C.SELECTION_TEXT};
        }}
        QLineEdit:focus, QSpinBox:focus, QPlainTextEdit:focus, QComboBox:focus {{
            border: 1px solid {C.BORDER_FOCUS};
        }}
        QLineEdit:disabled, QSpinBox:disabled, QPlainTextEdit:disabled, QComboBox:disabled {{
            background: {C.BACKGROUND};
            color: {C.TEXT_DISABLED};
        }}
    """


class Styles:
    BUTTON_PRIMARY = _button(
        Colors.PRIMARY, Colors.PRIMARY_HOVER, Colors.PRIMARY_PRESSED,
        Colors.TEXT_ON_PRIMARY, Colors.DISABLED_BG, Colors.TEXT_DISABLED,
    )
    BUTTON_EXPORT = _button(
        Colors.EXPORT, Colors.EXPORT_HOVER, Colors.EXPORT_HOVER,
        Colors.TEXT_ON_PRIMARY, Colors.DISABLED_BG, Colors.TEXT_DISABLED,
    )
    INPUT_FIELD = _inputs(Colors)


class StylesDark:
    BUTTON_PRIMARY = _button(
        ColorsDark.PRIMARY, ColorsDark.PRIMARY_HOVER, ColorsDark.PRIMARY_PRESSED,
        ColorsDark.TEXT_ON_PRIMARY, ColorsDark.DISABLED_BG, ColorsDark.TEXT_DISABLED,
    )
    BUTTON_EXPORT = _button(
        ColorsDark.EXPORT, ColorsDark.EXPORT_HOVER, ColorsDark.EXPORT_HOVER,
        ColorsDark.TEXT_ON_PRIMARY, ColorsDark.DISABLED_BG, ColorsDark.TEXT_DISABLED,
    )
    INPUT_FIELD = _inputs(ColorsDark)


def _global(C) -> str:
    return f"""
    * {{
        font-family: {Fonts.UI_FONT};
        font-size: {Fonts.BODY};
        color: {C.TEXT_PRIMARY};
    }}

    QMainWindow, QWidget {{
        background-color: {C.BACKGROUND};
    }}

    QLabel {{
        background-color: transparent;
        color: {C.TEXT_PRIMARY};
    }}

    QStatusBar {{
        background-color: {C.SURFACE};
        color: {C.TEXT_SECONDARY};
    }}

    QGroupBox {{
        background-color: {C.SURFACE};
        border: 1px solid {C.BORDER};
        border-radius: 6px;
        margin-top: 14px;
        padding-top: 8px;
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 8px;
        padding: 0 4px;
        background-color: {C.BACKGROUND};
        color: {C.PRIMARY};
        font-weight: {Fonts.WEIGHT_BOLD};
    }}

    QTreeWidget, QAbstractItemView {{
        background: {C.SURFACE};
        color: {C.TEXT_PRIMARY};
        selection-background-color: {C.SELECTION_BG};
        selection-color: {C.SELECTION_TEXT};
        border: 1px solid {C.BORDER};
    }}

    QSplitter::handle {{
        background: {C.BORDER};
    }}

    #mainHeader {{
        background-color: {C.SURFACE};
        border-bottom: 1px solid {C.BORDER};
    }}
    #mainTitle {{
        color: {C.PRIMARY};
        font-size: {Fonts.TITLE};
        font-weight: {Fonts.WEIGHT_BOLD};
    }}
    #mainSubtitle {{
        color: {C.TEXT_SECONDARY};
        font-size: {Fonts.SMALL};
    }}
    """ + _inputs(C)


GLOBAL_STYLESHEET = _global(Colors)
GLOBAL_STYLESHEET_DARK = _global(ColorsDark)


def apply_theme(app, is_dark: bool = False) -> None:
    """
    Apply the appropriate stylesheet (light or dark) to the QApplication.
    """
    set_dark_mode(is_dark)
    app.setStyleSheet(GLOBAL_STYLESHEET_DARK if is_dark else GLOBAL_STYLESHEET)


# Module-level dark mode state (set explicitly when theme changes)
_is_dark_mode = False


def set_dark_mode(is_dark: bool):
    """Explicitly set the dark mode state. Called by apply_theme."""
    global _is_dark_mode
    _is_dark_mode = is_dark


def get_colors():
    """Get the appropriate color palette based on current theme."""
    return ColorsDark if _is_dark_mode else Colors


def get_styles():
    """Get the appropriate styles based on current theme."""
    return StylesDark if _is_dark_mode else Styles

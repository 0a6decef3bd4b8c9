"""
Settings persistence model for the GUI.

Handles all persistent GUI state: the last form values, dark mode, the
last export directory and the splitter layout. Malformed data falls back
to defaults field by field; a corrupted file is offered for reset on
startup.
"""
import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from PySide6.QtCore import QObject, Signal

from paper_generator.core.models import GenerationConfig, ObjectiveLayout, QuestionType

logger = logging.getLogger(__name__)


@dataclass
class FormSettings:
    """Last-used form values, stored as plain JSON types."""

    institution_name: str
    num_questions: str
    language: str
    question_type: str
    objective_layout: str
    custom_prompt: str
    pdf_font_size: str
    show_paper_header: bool
    is_math_paper: bool

    @classmethod
    def from_config(cls, config: GenerationConfig) -> "FormSettings":
        return cls(
            institution_name=config.institution_name,
            num_questions=config.num_questions,
            language=config.language,
            question_type=config.question_type.value,
            objective_layout=config.objective_layout.value,
            custom_prompt=config.custom_prompt,
            pdf_font_size=config.pdf_font_size,
            show_paper_header=config.show_paper_header,
            is_math_paper=config.is_math_paper,
        )

    def to_config(self) -> GenerationConfig:
        """Build a GenerationConfig; raises ValueError if any value is invalid."""
        return GenerationConfig(
            institution_name=self.institution_name,
            num_questions=self.num_questions,
            language=self.language,
            question_type=QuestionType(self.question_type),
            objective_layout=ObjectiveLayout(self.objective_layout),
            custom_prompt=self.custom_prompt,
            pdf_font_size=self.pdf_font_size,
            show_paper_header=self.show_paper_header,
            is_math_paper=self.is_math_paper,
        )


class SettingsStore(QObject):
    """Lightweight JSON-backed store for persisting GUI preferences."""

    darkModeChanged = Signal(bool)
    CURRENT_VERSION = 1

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self.data: Dict[str, object] = {}
        self._load_error: Optional[str] = None

        if self.path.exists():
            try:
                self.data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                self._load_error = f"Settings file is corrupted:\n{e}"
                self.data = {}
            except OSError as e:
                self._load_error = f"Failed to read settings:\n{e}"
                self.data = {}

        if "version" not in self._get_dict():
            self.data["version"] = self.CURRENT_VERSION

    @property
    def load_error(self) -> Optional[str]:
        return self._load_error

    def check_load_error(self) -> bool:
        """
        Check if there was an error loading settings and prompt user to reset.

        Returns True if app should continue, False if app should exit.
        Call this after QApplication is created.
        """
        if not self._load_error:
            return True

        from PySide6.QtWidgets import QMessageBox

        msg = QMessageBox()
        msg.setIcon(QMessageBox.Icon.Warning)
        msg.setWindowTitle("Settings Error")
        msg.setText("Your settings file could not be loaded.")
        msg.setInformativeText(
            f"{self._load_error}\n\n"
            "Would you like to reset settings to defaults and continue?"
        )
        msg.setStandardButtons(
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        msg.setDefaultButton(QMessageBox.StandardButton.Yes)

        if msg.exec() == QMessageBox.StandardButton.Yes:
            self.reset()
            return True
        return False

    def reset(self) -> None:
        self.data = {"version": self.CURRENT_VERSION}
        self._load_error = None
        self._save()

    def get_form_settings(self) -> GenerationConfig:
        """
        Last saved form values as a GenerationConfig.

        Missing or wrongly typed fields take their defaults; if the stored
        combination is still invalid the whole form falls back to defaults.
        Never raises.
        """
        defaults = FormSettings.from_config(GenerationConfig())
        raw = self._get_dict().get("form")
        if not isinstance(raw, dict):
            return GenerationConfig()

        values: Dict[str, Any] = {}
        for f in fields(FormSettings):
            default = getattr(defaults, f.name)
            value = raw.get(f.name, default)
            values[f.name] = value if isinstance(value, type(default)) else default

        try:
            return FormSettings(**values).to_config()
        except ValueError as e:
            logger.warning(f"Stored form settings are invalid, using defaults: {e}")
            return GenerationConfig()

    def set_form_settings(self, config: GenerationConfig) -> None:
        self._get_dict()["form"] = asdict(FormSettings.from_config(config))
        self._save()

    def get_dark_mode(self) -> bool:
        ui = self._ui()
        return bool(ui.get("dark_mode", True))

    def set_dark_mode(self, enabled: bool) -> None:
        self._ui()["dark_mode"] = enabled
        self._save()
        self.darkModeChanged.emit(enabled)

    def get_export_dir(self) -> Optional[str]:
        value = self._ui().get("export_dir")
        return value if isinstance(value, str) else None

    def set_export_dir(self, value: str) -> None:
        self._ui()["export_dir"] = value
        self._save()

    def get_splitter_state(self) -> Optional[str]:
        """Get saved splitter state with hex validation.

        Returns None if state is missing or invalid hex.
        """
        state = self._ui().get("splitter_state")
        if not isinstance(state, str):
            return None
        try:
            bytes.fromhex(state)
            return state
        except ValueError:
            logger.warning("Invalid splitter state in settings, ignoring")
            return None

    def set_splitter_state(self, state: str) -> None:
        self._ui()["splitter_state"] = state
        self._save()

    def _ui(self) -> Dict[str, object]:
        ui = self._get_dict().setdefault("ui", {})
        if not isinstance(ui, dict):
            ui = {}
            self.data["ui"] = ui
        return ui  # type: ignore[return-value]

    def _get_dict(self) -> Dict[str, object]:
        if not isinstance(self.data, dict):
            self.data = {}
        return self.data

    def _save(self) -> None:
        """Write settings via a temp file and atomic rename."""
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.path.with_suffix(".tmp")
            temp_path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"Failed to save settings: {e}")
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)

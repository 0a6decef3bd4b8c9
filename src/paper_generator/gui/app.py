"""
Entry point for the PySide6 GUI.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def run():
    """
    Main entry point for the GUI application.
    """
    from dotenv import load_dotenv

    # .env in the working directory, before package imports; real environment variables win
    load_dotenv(override=False)

    from PySide6.QtWidgets import QApplication

    from paper_generator.common.constants import APP_TITLE
    from paper_generator.gui.main_window import MainWindow
    from paper_generator.gui.models.settings import SettingsStore
    from paper_generator.gui.styles.theme import apply_theme
    from paper_generator.gui.utils.paths import get_settings_path

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_TITLE)
    app.setApplicationDisplayName(APP_TITLE)
    app.setOrganizationName(APP_TITLE)

    settings = SettingsStore(get_settings_path())

    # Check for malformed settings and prompt user to reset if needed
    if not settings.check_load_error():
        sys.exit(1)

    apply_theme(app, settings.get_dark_mode())

    window = MainWindow(settings)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()

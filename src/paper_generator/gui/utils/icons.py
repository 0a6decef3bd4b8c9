"""Material Design icons via QtAwesome."""
import qtawesome as qta

from paper_generator.gui.styles.theme import get_colors


class MaterialIcons:
    """Centralized Material Design icon definitions using QtAwesome."""

    @staticmethod
    def upload():
        """Upload files icon."""
        return qta.icon('mdi6.upload-outline', color=get_colors().PRIMARY)

    @staticmethod
    def file_pdf():
        return qta.icon('mdi6.file-pdf-box', color=get_colors().ERROR)

    @staticmethod
    def file_image():
        return qta.icon('mdi6.file-image-outline', color=get_colors().INFO)

    @staticmethod
    def folder():
        """Folder icon (subtle)."""
        return qta.icon('mdi6.folder-outline', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def database():
        """Content source section icon."""
        return qta.icon('mdi6.database-outline', color=get_colors().PRIMARY)

    @staticmethod
    def magic(color=None):
        """Generate icon."""
        return qta.icon('mdi6.creation', color=color or get_colors().TEXT_ON_PRIMARY)

    @staticmethod
    def download(color=None):
        """Download PDF icon."""
        return qta.icon('mdi6.file-download-outline', color=color or get_colors().TEXT_ON_PRIMARY)

    @staticmethod
    def lightbulb():
        """Answers icon."""
        return qta.icon('mdi6.lightbulb-on-outline', color=get_colors().ANSWERS_ACCENT)

    @staticmethod
    def alert(color=None):
        return qta.icon('mdi6.alert-circle-outline', color=color or get_colors().ERROR)

    @staticmethod
    def close():
        """Close/X icon."""
        return qta.icon('mdi6.close', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def delete():
        """Clear/delete icon."""
        return qta.icon('mdi6.delete-outline', color=get_colors().ERROR)

    @staticmethod
    def content_copy():
        """Copy icon."""
        return qta.icon('mdi6.content-copy', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def content_save():
        """Save icon."""
        return qta.icon('mdi6.content-save-outline', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def theme():
        """Dark/light toggle icon."""
        return qta.icon('mdi6.theme-light-dark', color=get_colors().TEXT_SECONDARY)

    @staticmethod
    def spinner(widget):
        """Animated busy indicator bound to `widget`."""
        return qta.icon('mdi6.loading', color=get_colors().PRIMARY, animation=qta.Spin(widget))

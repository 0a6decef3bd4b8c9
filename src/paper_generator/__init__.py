"""Top-level package for the AI Question Paper Generator.

Provides subpackages:
- paper_generator.core – immutable data models (config, sources, results)
- paper_generator.generation – prompt construction and the Gemini stream client
- paper_generator.sources – uploaded files, PDF text extraction, sample storage
- paper_generator.export – bitmap slicing and PDF packaging
- paper_generator.rendering – math typesetting for the preview
- paper_generator.gui – PySide6 desktop app
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    import sys
    from pathlib import Path

    if not getattr(sys, 'frozen', False):
        pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    else:
        pyproject = Path(getattr(sys, "_MEIPASS", ".")) / "pyproject.toml"

    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.1"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import version as pkg_version, PackageNotFoundError
        try:
            return pkg_version("paper_generator")
        except PackageNotFoundError:
            return "0.0.0"
    except ImportError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]

import os
import pytest
import sys
from pathlib import Path
from PIL import Image

# Run Qt headless when no display is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add src to sys.path so we can import paper_generator
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


# Common test fixtures
@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple PNG on disk."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def make_pdf(tmp_path: Path):
    """Factory writing a PDF with one page per string in `pages`."""
    import fitz

    def _make(name: str, pages):
        path = tmp_path / name
        doc = fitz.open()
        for text in pages:
            page = doc.new_page()
            if text:
                page.insert_text((72, 72), text)
        doc.save(str(path))
        doc.close()
        return path

    return _make


@pytest.fixture
def tall_bitmap():
    """A 3x-scale A4-width bitmap spanning roughly three pages."""
    return Image.new("RGB", (794 * 3, 10000), color="white")

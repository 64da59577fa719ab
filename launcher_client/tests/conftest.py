import os

import pytest


def pytest_runtest_setup(item):
    if item.get_closest_marker("pyqt_required"):
        if not os.getenv("PYQT_TESTS"):
            pytest.skip("PYQT_TESTS not set; skipping PyQt-dependent test")


@pytest.fixture
def write_meta(tmp_path):
    """Create games/<folder>/meta.json with the given JSON text."""

    def _write(folder: str, text: str):
        game_dir = tmp_path / "games" / folder
        game_dir.mkdir(parents=True, exist_ok=True)
        meta = game_dir / "meta.json"
        meta.write_text(text, encoding="utf-8")
        return meta

    return _write

import pytest


@pytest.fixture
def write_tet(tmp_path):
    def _write(text, name="model.tet"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write

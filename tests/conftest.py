import os
from pathlib import Path

import pytest

# Qt must not need a display during tests.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def tmp_settings(tmp_path: Path):
    """Point QSettings at a temporary INI directory to keep tests isolated."""
    from PySide6.QtCore import QSettings

    for fmt in (QSettings.Format.NativeFormat, QSettings.Format.IniFormat):
        QSettings.setPath(fmt, QSettings.Scope.UserScope, str(tmp_path))
    s = QSettings("SkyNav.org", "SkyNav")
    s.clear()
    s.sync()
    yield s
    s.clear()
    s.sync()

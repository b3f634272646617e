import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture(scope="session", autouse=True)
def isolate_user_config():
    """Point the user-level configuration directory at an empty temp dir.

    Some tests expect the built-in defaults. A ``~/.change_preview``
    directory on the developer machine must not leak into them.
    """
    with tempfile.TemporaryDirectory(prefix="change_preview_home_") as tmp:
        with patch("change_preview.config.loader._get_config_directory", return_value=Path(tmp)):
            yield

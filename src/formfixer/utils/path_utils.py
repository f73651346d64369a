# src/formfixer/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package paths.
    """

    @staticmethod
    def get_package_root() -> Path:
        """Returns the directory of the installed `formfixer` package."""
        return Path(__file__).resolve().parent.parent

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_package_root() / "settings.json"

    @staticmethod
    def ensure_dir_exists(path: Path) -> Path:
        """Creates the directory (and parents) when missing and returns it."""
        path.mkdir(parents=True, exist_ok=True)
        return path

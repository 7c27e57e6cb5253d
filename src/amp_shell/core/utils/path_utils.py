# src/amp_shell/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and user paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_content_root() -> Path:
        """Returns the directory holding the top-level packages (the 'src' dir in a checkout)."""
        return Path(__file__).resolve().parents[3]

    @staticmethod
    def get_shell_package_root() -> Path:
        return PathUtils.get_content_root() / "amp_shell"

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_shell_package_root() / "settings.json"

    # --- Helper methods ---

    @staticmethod
    def get_output_path(input_path: Path, output_dir: Path) -> Path:
        """
        Returns the path a sanitized copy of `input_path` is written to.
        Creates the output directory if it doesn't exist.
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir / input_path.name

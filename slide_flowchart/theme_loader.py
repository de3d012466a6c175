"""Theme loader for flowchart CSS themes.

A theme is either the name of a file bundled in ``slide_flowchart/themes``
(``default``, ``dark``) or a path to a user ``.css`` file carrying the same
``:root`` variables.
"""
from pathlib import Path
from typing import List, Union

THEMES_DIR = Path(__file__).parent / "themes"


def resolve_theme_path(theme: Union[str, Path] = "default") -> Path:
    """
    Locate the CSS file for a theme name or path.

    Raises:
        FileNotFoundError: If neither a bundled theme nor the file exists
        ValueError: If a bundled theme name contains path characters
    """
    candidate = Path(theme)
    if candidate.suffix == ".css":
        if not candidate.is_file():
            raise FileNotFoundError(f"Theme file '{candidate}' not found")
        return candidate

    # Bundled names only; no path traversal
    name = str(theme)
    if not name.replace("_", "").replace("-", "").isalnum():
        raise ValueError(f"Invalid theme name: {name}")

    theme_path = THEMES_DIR / f"{name}.css"
    if not theme_path.is_file():
        raise FileNotFoundError(
            f"Theme '{name}' not found. Available themes: {list_available_themes()}"
        )
    return theme_path


def get_css(theme: Union[str, Path] = "default") -> str:
    """CSS text of a bundled theme or a theme file."""
    return resolve_theme_path(theme).read_text(encoding="utf-8")


def list_available_themes() -> List[str]:
    """Names of the bundled themes, sorted."""
    if not THEMES_DIR.exists():
        return []
    return sorted(f.stem for f in THEMES_DIR.glob("*.css") if f.is_file())


def validate_theme(theme: Union[str, Path]) -> bool:
    try:
        resolve_theme_path(theme)
        return True
    except (FileNotFoundError, ValueError):
        return False

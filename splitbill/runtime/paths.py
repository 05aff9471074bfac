"""Where splitbill looks for configuration.

The project root is ``$SPLITBILL_HOME`` when set, otherwise the working
directory. Project overrides live under ``<root>/config``; the packaged
keyword tables ship inside ``splitbill/receipt/rules``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

HOME_ENV = "SPLITBILL_HOME"
PACKAGE_DIR = Path(__file__).resolve().parents[1]
KEYWORDS_FILENAME = "receipt_keywords.toml"


def _root_from_env() -> Path:
    home = os.environ.get(HOME_ENV, "").strip()
    if home:
        return Path(home).expanduser()
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Resolved locations for one project root."""

    root: Path = field(default_factory=_root_from_env)

    def __post_init__(self) -> None:
        self.root = Path(self.root).resolve()

    @property
    def config(self) -> Path:
        return self.root / "config"

    @property
    def keyword_rules(self) -> Path:
        """Project overrides, merged over the packaged tables when present."""
        return self.config / KEYWORDS_FILENAME

    @property
    def default_keyword_rules(self) -> Path:
        return PACKAGE_DIR / "receipt" / "rules" / "default_keywords.toml"

    def keyword_rule_files(self) -> list[Path]:
        """Keyword files in merge order: packaged defaults first."""
        return [self.default_keyword_rules, self.keyword_rules]


_current: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    global _current
    if _current is None:
        _current = ProjectPaths()
    return _current


def set_project_root(root: Path) -> ProjectPaths:
    """Re-point path resolution at ``root`` and return the new paths."""
    global _current
    _current = ProjectPaths(root=root)
    return _current

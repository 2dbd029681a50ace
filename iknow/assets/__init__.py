"""Notation sources shipped with the package."""

from pathlib import Path

ASSETS_DIR = Path(__file__).parent
SELF_ROOT_PATH = ASSETS_DIR / "self_root.txt"


def read_self_root() -> str:
    return SELF_ROOT_PATH.read_text(encoding="utf-8")


__all__ = ["ASSETS_DIR", "SELF_ROOT_PATH", "read_self_root"]

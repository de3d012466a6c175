"""Hierarchy naming: level letters and per-level sibling numbers."""
import re
from typing import Iterable, List

ROOT_LEVEL = "A"

_ID_RE = re.compile(r"^([A-Z]+)(\d+)$")
_LEVEL_RE = re.compile(r"^[A-Z]+")


def level_of(node_id: str) -> str:
    """Leading letter-run of an ID (``"ZA3"`` -> ``"ZA"``), empty if none."""
    match = _LEVEL_RE.match(node_id or "")
    return match.group(0) if match else ""


def split_id(node_id: str):
    """Return ``(level, number)`` for a well-formed ID, else ``None``."""
    match = _ID_RE.match(node_id or "")
    if not match:
        return None
    return match.group(1), int(match.group(2))


def next_level(level: str) -> str:
    """
    Level of a child of ``level``.

    The trailing letter is advanced; ``Z`` grows a new segment instead
    (``A -> B``, ``Y -> Z``, ``Z -> ZA``, ``ZZ -> ZZA``).  An empty level
    is treated as "no parent" and yields the root level.
    """
    if not level:
        return ROOT_LEVEL
    last = level[-1]
    if "A" <= last < "Z":
        return level[:-1] + chr(ord(last) + 1)
    return level + "A"


def level_depth(level: str) -> int:
    """Depth of a level in the ``A..Z, ZA..ZZ, ZZA..`` sequence (``A`` is 0)."""
    if not level:
        return -1
    return 26 * (len(level) - 1) + ord(level[-1]) - ord("A")


def generate_sibling_ids(level: str, count: int, start: int = 1) -> List[str]:
    """``count`` consecutive IDs at ``level`` beginning with number ``start``."""
    return [f"{level}{start + offset}" for offset in range(max(count, 0))]


def next_sibling_number(level: str, existing_ids: Iterable[str]) -> int:
    """
    First free sibling number at ``level``.

    One past the highest number already used at that level, so gaps left by
    deletions are never refilled and a new ID can not collide with a
    survivor.  ``1`` when nothing exists yet.
    """
    highest = 0
    for node_id in existing_ids:
        parts = split_id(node_id)
        if parts and parts[0] == level:
            highest = max(highest, parts[1])
    return highest + 1


def find_next_available_root_id(existing_root_ids: Iterable[str]) -> str:
    """Smallest unused ``A<n>``; numbers freed by deleted roots are reused."""
    used = set()
    for node_id in existing_root_ids:
        parts = split_id(node_id)
        if parts and parts[0] == ROOT_LEVEL:
            used.add(parts[1])

    number = 1
    while number in used:
        number += 1
    return f"{ROOT_LEVEL}{number}"

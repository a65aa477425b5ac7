
"""
pips.py
Pip layout table shared by the renderers. Positions are in a normalized 0..1 square.
Values outside 1..6 (dice with other face counts, or bad data) fall back to a single centre pip;
text renderers show the number instead.
"""

from typing import List, Tuple

PIP_POSITIONS = {
    1: [(0.5, 0.5)],
    2: [(0.25, 0.25), (0.75, 0.75)],
    3: [(0.25, 0.25), (0.5, 0.5), (0.75, 0.75)],
    4: [(0.25, 0.25), (0.75, 0.25), (0.25, 0.75), (0.75, 0.75)],
    5: [(0.25, 0.25), (0.75, 0.25), (0.5, 0.5), (0.25, 0.75), (0.75, 0.75)],
    6: [(0.25, 0.2), (0.25, 0.5), (0.25, 0.8), (0.75, 0.2), (0.75, 0.5), (0.75, 0.8)],
}

FALLBACK_POSITIONS = [(0.5, 0.5)]

_GLYPHS = {1: "⚀", 2: "⚁", 3: "⚂", 4: "⚃", 5: "⚄", 6: "⚅"}


def has_pip_layout(value: int, sides: int = 6) -> bool:
    """True when the face can be drawn with pips (a d6 face, or a 1..6 face of a smaller die)."""
    return sides <= 6 and value in PIP_POSITIONS


def pip_positions(value: int) -> List[Tuple[float, float]]:
    """
    Pip centres for a face value.
    Args:
        value (int): Face value.
    Returns:
        list[tuple]: Normalized (x, y) centres; a single centre pip for values outside 1..6.
    """
    return list(PIP_POSITIONS.get(value, FALLBACK_POSITIONS))


def face_label(value: int, sides: int = 6) -> str:
    """
    Short text form of a face for terminal output: a die glyph for drawable faces, the number
    otherwise.
    """
    if has_pip_layout(value, sides):
        return f"{_GLYPHS[value]} {value}"
    return f"[{value}]"


"""
dice.py
Defines the Die type and parsing of dice from command-line style strings.
Related modules:
- probability.py: Compares dice face by face.
- engine.py: Rolls dice by drawing a face index.
"""

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

EXAMPLE_USAGE = "nontransitive-dice 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3"

_FACE_RE = re.compile(r"^\d+$")


class InvalidDieError(ValueError):
    """
    Raised when a Die is constructed with no faces or with a face that is not a non-negative integer.
    """
    pass


class DiceSpecError(ValueError):
    """
    Raised when command-line dice definitions cannot be parsed.
    """
    pass


@dataclass(frozen=True)
class Die:
    """
    An immutable die: an ordered sequence of non-negative integer faces.
    Args:
        faces (tuple[int]): Face values, at least one.
    """
    faces: Tuple[int, ...]

    def __post_init__(self):
        faces = tuple(self.faces)
        if not faces:
            raise InvalidDieError("a die must have at least one face")
        for face in faces:
            if isinstance(face, bool) or not isinstance(face, int) or face < 0:
                raise InvalidDieError(f"faces must be non-negative integers, got {face!r}")
        object.__setattr__(self, "faces", faces)

    def __len__(self) -> int:
        return len(self.faces)

    def face(self, index: int) -> int:
        return self.faces[index]

    def __str__(self) -> str:
        return ",".join(str(f) for f in self.faces)


def parse_die(text: str, index: int = 0) -> Die:
    """
    Parse a comma-separated face list such as "2,2,4,4,9,9".
    Args:
        text (str): Face list.
        index (int): Zero-based position of the die, used in error messages.
    Returns:
        Die: The parsed die.
    Raises:
        DiceSpecError: If any face is not a non-negative integer.
    """
    faces = []
    for part in text.split(","):
        part = part.strip()
        if not _FACE_RE.match(part):
            raise DiceSpecError(f"Non-integer face {part!r} in dice #{index + 1}")
        faces.append(int(part))
    return Die(tuple(faces))


def parse_dice(args: Sequence[str], min_dice: int = 3) -> List[Die]:
    """
    Parse one die per argument.
    Args:
        args (list[str]): Face lists, one per die.
        min_dice (int): Minimum number of dice required.
    Returns:
        list[Die]: Parsed dice in argument order.
    Raises:
        DiceSpecError: If fewer than min_dice are given or any die is malformed.
    """
    if len(args) < min_dice:
        raise DiceSpecError(
            f"Need at least {min_dice} dice, got {len(args)}.\nExample:\n{EXAMPLE_USAGE}"
        )
    return [parse_die(arg, i) for i, arg in enumerate(args)]

"""Helper functionality that is used in other modules of this package."""

from __future__ import annotations

OPENING_BRACKETS = "<([{"
CLOSING_BRACKETS = ">)]}"


def camel_to_snake(name: str) -> str:
    """Convert a PascalCase (or camelCase) identifier to snake_case.

    Every uppercase character except the first one is prefixed with an underscore,
    so acronyms are split per character.

    Args:
        name (str): The original identifier.

    Returns:
        str: The snake_case identifier.

    Examples:
        >>> camel_to_snake("Patient")
        'patient'
        >>> camel_to_snake("MedicalRecord")
        'medical_record'
    """
    snake = []
    for i, char in enumerate(name):
        if char.isupper() and i != 0:
            snake.append("_")
        snake.append(char.lower())

    return "".join(snake)


def strip_line_comments(content: str) -> str:
    """Blank out every line that is a `//` comment.

    Line breaks are kept, so line-anchored patterns still work on the result.

    Args:
        content (str): Raw source text.

    Returns:
        str: The source text without comment lines.
    """
    return "\n".join("" if line.strip().startswith("//") else line for line in content.split("\n"))


def split_top_level(text: str, depth_aware: bool = False) -> list[str]:
    """Split a comma separated list, trimming the pieces and dropping empty ones.

    The flat split does not track brackets, so `HashMap<K, V>` ends up in two pieces.
    With `depth_aware`, commas nested in `<>`, `()`, `[]` or `{}` do not split.

    Args:
        text (str): The list text, without the surrounding brackets.
        depth_aware (bool): Whether to ignore commas inside brackets.

    Returns:
        list[str]: The non-empty, trimmed pieces in order.
    """
    if not depth_aware:
        pieces = text.split(",")
    else:
        pieces = []
        depth = 0
        current: list[str] = []
        for char in text:
            if char in OPENING_BRACKETS:
                depth += 1
            # `->` is not a closing bracket
            elif char in CLOSING_BRACKETS and not (char == ">" and current and current[-1] == "-"):
                depth = max(depth - 1, 0)
            elif char == "," and depth == 0:
                pieces.append("".join(current))
                current = []
                continue
            current.append(char)
        pieces.append("".join(current))

    return [piece.strip() for piece in pieces if piece.strip()]

"""Command parsing utilities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParsedCommand:
    command: str
    args: list[str]

    @property
    def text(self) -> str:
        """Arguments joined back with single spaces."""
        return " ".join(self.args)


def parse_command(text: str, prefix: str = "!") -> ParsedCommand | None:
    """Split prefixed text into a command token and arguments.

    Args:
        text: The message text to parse.
        prefix: Literal, case-sensitive command prefix.

    Returns:
        None if `text` does not start with `prefix`. Otherwise the first
        token lower-cased and the remaining tokens unchanged. A bare prefix
        yields an empty command, which never matches a plugin.
    """
    if not text.startswith(prefix):
        return None
    tokens = text[len(prefix) :].split()
    if not tokens:
        return ParsedCommand(command="", args=[])
    return ParsedCommand(command=tokens[0].lower(), args=tokens[1:])

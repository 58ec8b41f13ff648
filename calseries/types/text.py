"""Library for escaping and unescaping TEXT values."""

UNESCAPE_CHAR = {"\\\\": "\\", "\\;": ";", "\\,": ",", "\\N": "\n", "\\n": "\n"}
ESCAPE_CHAR = {"\\": "\\\\", ";": "\\;", ",": "\\,", "\n": "\\n"}


def parse_text(value: str) -> str:
    """Parse an escaped TEXT value."""
    result = []
    pos = 0
    while pos < len(value):
        pair = value[pos : pos + 2]
        if pair in UNESCAPE_CHAR:
            result.append(UNESCAPE_CHAR[pair])
            pos += 2
        else:
            result.append(value[pos])
            pos += 1
    return "".join(result)


def encode_text(value: str) -> str:
    """Serialize text as an escaped TEXT value."""
    return "".join(ESCAPE_CHAR.get(char, char) for char in value)

def escape_text(value: str | None) -> str:
    """Escape a vCard TEXT value.

    Backslash goes first so the escapes added for newline, comma and
    semicolon are not escaped a second time. CRLF and bare CR are treated as
    newlines so no raw carriage return can reach the document.
    """
    if not value:
        return ""
    text = str(value).replace("\r\n", "\n").replace("\r", "\n")
    return text.replace("\\", "\\\\").replace("\n", "\\n").replace(",", "\\,").replace(";", "\\;")


def escape_param(value: str | None) -> str:
    """Make a value safe for use inside a parameter list (TYPE=...)."""
    if not value:
        return ""
    cleaned = " ".join(str(value).split())
    for char in (":", ";", ",", '"'):
        cleaned = cleaned.replace(char, " ")
    return " ".join(cleaned.split())

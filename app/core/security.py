def redact_identifier(identifier: str | None, visible_chars: int = 8) -> str:
    """
    Redact an identifier for logging purposes.
    Shows the first few characters followed by ***.
    """
    if not identifier:
        return "None"
    if len(identifier) <= visible_chars:
        return identifier
    return f"{identifier[:visible_chars]}***"

from app.core.constants import CONTINUATION_LINE_BYTES, CRLF, MAX_LINE_BYTES
from app.core.errors import EncodingInvariantViolation


def _cut(encoded: bytes, start: int, budget: int) -> int:
    """Return the largest end offset <= start + budget that decodes cleanly."""
    end = min(start + budget, len(encoded))
    while end > start:
        try:
            encoded[start:end].decode("utf-8")
            return end
        except UnicodeDecodeError:
            end -= 1
    raise EncodingInvariantViolation(f"Cannot fold line at byte {start}: no valid UTF-8 boundary")


def fold_line(line: str) -> list[str]:
    """Split one logical line into physical lines within the byte budget.

    The first segment carries up to 75 bytes, each continuation up to 74
    bytes after its single leading space.
    """
    encoded = line.encode("utf-8")
    if len(encoded) <= MAX_LINE_BYTES:
        return [line]

    segments: list[str] = []
    start = 0
    budget = MAX_LINE_BYTES
    while start < len(encoded):
        end = _cut(encoded, start, budget)
        chunk = encoded[start:end].decode("utf-8")
        segments.append(chunk if start == 0 else f" {chunk}")
        start = end
        budget = CONTINUATION_LINE_BYTES
    return segments


def fold_document(document: str) -> str:
    """Fold every CRLF-terminated logical line of a document."""
    lines = document.split(CRLF)
    if lines and lines[-1] == "":
        lines.pop()
    out: list[str] = []
    for line in lines:
        out.extend(fold_line(line))
    return CRLF.join(out) + CRLF


def unfold_document(document: str) -> str:
    """Join continuation lines back into their logical lines."""
    return document.replace(f"{CRLF} ", "")


def verify_document(document: str) -> None:
    """Raise EncodingInvariantViolation unless the folded document is well-formed."""
    if not document.endswith(CRLF):
        raise EncodingInvariantViolation("Document is not CRLF terminated")

    physical = document[: -len(CRLF)].split(CRLF)
    if not physical or physical[0] != "BEGIN:VCARD" or physical[-1] != "END:VCARD":
        raise EncodingInvariantViolation("Document is not framed by BEGIN:VCARD / END:VCARD")

    for index, line in enumerate(physical):
        if "\r" in line or "\n" in line:
            raise EncodingInvariantViolation(f"Bare line break in physical line {index}")
        size = len(line.encode("utf-8"))
        if size > MAX_LINE_BYTES:
            raise EncodingInvariantViolation(f"Physical line {index} is {size} bytes (max {MAX_LINE_BYTES})")
        if not line or line == " ":
            raise EncodingInvariantViolation(f"Empty physical line {index}")

    for line in unfold_document(document)[: -len(CRLF)].split(CRLF):
        if ":" not in line:
            raise EncodingInvariantViolation(f"Content line has no value separator: {line[:20]!r}")

from app.services.vcard.document import build_vcard, compose_lines, render_vcard, vcard_filename
from app.services.vcard.escaping import escape_text
from app.services.vcard.fields import format_name
from app.services.vcard.folding import fold_document, fold_line, unfold_document, verify_document
from app.services.vcard.photo import PhotoClient, PhotoEmbedder
from app.services.vcard.socials import CompatibilityTriple, social_policy

__all__ = [
    "CompatibilityTriple",
    "PhotoClient",
    "PhotoEmbedder",
    "build_vcard",
    "compose_lines",
    "escape_text",
    "fold_document",
    "fold_line",
    "format_name",
    "render_vcard",
    "social_policy",
    "unfold_document",
    "vcard_filename",
    "verify_document",
]

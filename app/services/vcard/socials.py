from collections.abc import Iterable, Mapping

from app.core.constants import SOCIAL_PLATFORMS
from app.services.vcard.escaping import escape_text


class CompatibilityTriple:
    """
    Emits every social link three times, once per consuming ecosystem.

    1. ``URL;TYPE=<Label>`` for clients that read typed URLs (Android, Outlook).
    2. ``itemN.URL`` + ``itemN.X-ABLabel`` for label-aware clients (Apple).
    3. ``X-SOCIALPROFILE;type=<key>`` for clients matching on the profile key.

    Dropping any of the three breaks import on some class of client, so the
    redundancy is intentional.
    """

    def __init__(self, platforms: tuple[tuple[str, str], ...] = SOCIAL_PLATFORMS):
        self.platforms = platforms

    def encode(self, index: int, key: str, label: str, url: str) -> list[str]:
        value = escape_text(url)
        return [
            f"URL;TYPE={label}:{value}",
            f"item{index}.URL;type=pref:{value}",
            f"item{index}.X-ABLabel:{label}",
            f"X-SOCIALPROFILE;type={key}:{value}",
        ]

    def lines(self, socials: Mapping[str, str] | Iterable[tuple[str, str]] | None) -> list[str]:
        if not socials:
            return []
        socials = dict(socials)
        out: list[str] = []
        index = 0
        for key, label in self.platforms:
            url = (socials.get(key) or "").strip()
            if not url:
                continue
            index += 1
            out.extend(self.encode(index, key, label, url))
        return out


social_policy = CompatibilityTriple()

"""
vCard 3.0 protocol constants. Keep these simple and documented.
"""

VCARD_VERSION: str = "3.0"
VCARD_MEDIA_TYPE: str = "text/vcard;charset=utf-8"
VCARD_EXTENSION: str = ".vcf"
CRLF: str = "\r\n"

# Folding budget in UTF-8 bytes; continuations spend one byte on the leading space
MAX_LINE_BYTES: int = 75
CONTINUATION_LINE_BYTES: int = MAX_LINE_BYTES - 1

# Phone channels in emission order, mapped to their TYPE parameter
PHONE_ORDER: tuple[str, ...] = ("CELL", "WORK", "HOME", "MAIN", "FAX", "OTHER")
PHONE_TYPE_PARAMS: dict[str, str] = {
    "CELL": "CELL,VOICE,PREF",
    "WORK": "WORK,VOICE",
    "HOME": "HOME,VOICE",
    "MAIN": "MAIN,VOICE",
    "FAX": "FAX",
    "OTHER": "VOICE",
}
DEFAULT_PHONE_TYPE_PARAM: str = "VOICE"

# Suffixes that join the formatted name with a comma ("John Smith, Jr.")
GENERATIONAL_SUFFIXES: frozenset[str] = frozenset({"jr", "sr", "ii", "iii", "iv"})

# (storage key, display label), in emission order
SOCIAL_PLATFORMS: tuple[tuple[str, str], ...] = (
    ("facebook", "Facebook"),
    ("instagram", "Instagram"),
    ("tiktok", "TikTok"),
    ("youtube", "YouTube"),
    ("linkedin", "LinkedIn"),
    ("twitter", "Twitter"),
    ("whatsapp", "WhatsApp"),
)
# Link kinds as stored by the card editor that differ from the platform key
SOCIAL_KIND_ALIASES: dict[str, str] = {"x": "twitter"}

DEFAULT_PHOTO_TYPE: str = "JPEG"
PHOTO_SUFFIX_TYPES: dict[str, str] = {
    ".png": "PNG",
    ".gif": "GIF",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
}
PHOTO_CONTENT_TYPES: dict[str, str] = {
    "image/png": "PNG",
    "image/gif": "GIF",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
}

CARD_KEY: str = "{prefix}card:{card_id}"
CARD_LINKS_KEY: str = "{prefix}card_links:{card_id}"
CARD_CONTACTS_KEY: str = "{prefix}card_contacts:{card_id}"
CARD_VCARD_KEY: str = "{prefix}card_vcard:{card_id}"

# Permanent location of a published vCard, relative to PUBLIC_BASE_URL
VCARD_FILE_PATH: str = "files/cards/{card_id}/{filename}"

import argparse
import asyncio
import json
import sys
from pathlib import Path

from loguru import logger

# Add project root to path to import the app package
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from app.models.profile import ProfileRecord  # noqa: E402
from app.services.vcard import PhotoEmbedder, build_vcard  # noqa: E402


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Export a profile JSON file as a vCard 3.0 (.vcf) file.")
    parser.add_argument("profile", type=Path, help="Path to a JSON file holding the profile fields")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Output .vcf path (default: from the name)")
    parser.add_argument("--no-photo", action="store_true", help="Do not fetch and embed the photo")
    parser.add_argument("--timeout", type=float, default=None, help="Photo fetch deadline in seconds")
    return parser.parse_args(argv)


async def export(profile_path: Path, output: Path | None, include_photo: bool, timeout: float | None) -> Path:
    profile = ProfileRecord.model_validate(json.loads(profile_path.read_text(encoding="utf-8")))
    embedder = PhotoEmbedder()
    try:
        document = await build_vcard(profile, embedder, include_photo=include_photo, timeout=timeout)
    finally:
        await embedder.close()

    target = output or profile_path.with_name(document.filename)
    # newline="" keeps the CRLF terminators intact
    with open(target, "w", encoding="utf-8", newline="") as fh:
        fh.write(document.text)
    return target


def main(argv=None):
    args = parse_args(argv)
    try:
        target = asyncio.run(export(args.profile, args.output, not args.no_photo, args.timeout))
    except (OSError, ValueError) as e:
        logger.error(f"Export failed: {e}")
        sys.exit(1)
    logger.info(f"Wrote {target}")


if __name__ == "__main__":
    main()

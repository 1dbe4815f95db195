"""
Quran bundle builder

Fetches the full text of every surah from AlQuran Cloud and writes the
quran_bundled.json document served as the last offline tier.

Usage:
    python -m noor.data.build_quran_bundle [--output PATH] [--delay SECONDS]
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ..constants import TOTAL_SURAHS
from ..domain.cache.domain_services import has_real_text
from ..infrastructure.http.exceptions import PayloadShapeException
from ..infrastructure.http.quran_client import AlQuranCloudClient

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path(__file__).with_name("quran_bundled.json")


async def build_bundled_quran(
    client: AlQuranCloudClient,
    numbers: Optional[Iterable[int]] = None,
    delay_seconds: float = 0.0,
) -> Dict[str, Any]:
    """
    Fetch each surah and assemble the bundle document.

    Raises:
        FetchException: If any surah cannot be fetched or has no usable text
    """
    numbers = list(numbers or range(1, TOTAL_SURAHS + 1))
    surahs = []

    for index, number in enumerate(numbers):
        surah = await client.fetch_surah(number)
        if not has_real_text(surah):
            raise PayloadShapeException(
                f"Surah {number} has no usable text", url=client.surah_url(number)
            )
        surahs.append(surah.model_dump(mode="json"))
        logger.info(f"Fetched surah {number} ({len(surah.ayahs)} ayahs)")

        if delay_seconds and index < len(numbers) - 1:
            await asyncio.sleep(delay_seconds)

    return {"surahs": surahs}


def write_bundle(document: Dict[str, Any], path: Path) -> int:
    """Write the bundle as UTF-8 JSON and return the number of ayahs written."""
    path.write_text(
        json.dumps(document, ensure_ascii=False, indent=1) + "\n", encoding="utf-8"
    )
    return sum(len(surah["ayahs"]) for surah in document["surahs"])


async def main():
    """Main entry point for regenerating the bundled Quran text."""
    import argparse

    from ..core.config import get_settings
    from ..infrastructure.http.fetcher import RemoteContentFetcher

    parser = argparse.ArgumentParser(description="Build the bundled Quran text")
    parser.add_argument(
        "--output",
        default=str(DEFAULT_OUTPUT),
        help="Destination JSON file",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.5,
        help="Seconds to wait between surah requests",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    settings = get_settings()

    async with RemoteContentFetcher(
        base_delay=settings.FETCH_RETRY_BASE_DELAY,
        user_agent=settings.HTTP_USER_AGENT,
    ) as fetcher:
        client = AlQuranCloudClient(
            fetcher, base_url=settings.QURAN_API_URL, edition=settings.QURAN_EDITION
        )
        document = await build_bundled_quran(client, delay_seconds=args.delay)

    ayahs = write_bundle(document, Path(args.output))
    logger.info(f"Wrote {len(document['surahs'])} surahs ({ayahs} ayahs) to {args.output}")


if __name__ == "__main__":
    asyncio.run(main())

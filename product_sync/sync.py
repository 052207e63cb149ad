#!/usr/bin/env python
"""
Sync a JSON Lines file of scraped products into Supabase.

    python -m product_sync.sync items.jsonl
    python -m product_sync.sync items.jsonl --images-dir data/images
    python -m product_sync.sync items.jsonl --no-images --limit 50
"""
from __future__ import annotations

import argparse
import itertools
import logging
import sys
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, NamedTuple, Optional

import orjson
from pydantic import ValidationError

from . import change_log
from .config import Settings, get_settings
from .image_archiver import ImageArchiver, LocalImageArchiver, SupabaseImageArchiver
from .schema import Product, UpsertResponse
from .supabase_client import get_supabase
from .upsert_product import ProductGateway, upsert_product

logger = logging.getLogger(__name__)


class ScrapedItem(NamedTuple):
    product: Product
    image_url: Optional[str] = None


@dataclass
class SyncSummary:
    counts: Counter = field(default_factory=Counter)
    images_archived: int = 0

    @property
    def failed(self) -> int:
        return self.counts[UpsertResponse.Failed]

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def as_dict(self) -> dict:
        out = {r.value: self.counts[r] for r in UpsertResponse}
        out["ImagesArchived"] = self.images_archived
        return out


def read_products(path: Path) -> Iterator[ScrapedItem]:
    """
    Yield one ScrapedItem per line of a JSON Lines file.

    `imageUrl` is split off each record since it is not a products column.
    Lines that fail to parse are logged and skipped.
    """
    with open(path, "rb") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                raw = orjson.loads(line)
            except orjson.JSONDecodeError as e:
                logger.warning("%s:%d is not valid JSON: %s", path, line_no, e)
                continue
            if not isinstance(raw, dict):
                logger.warning("%s:%d is not a JSON object", path, line_no)
                continue
            image_url = raw.pop("imageUrl", None)
            try:
                product = Product.model_validate(raw)
            except ValidationError as e:
                logger.warning("%s:%d is not a valid product: %s", path, line_no, e)
                continue
            yield ScrapedItem(product, image_url)


def sync_products(
    items: Iterable[ScrapedItem],
    gateway: ProductGateway,
    archiver: Optional[ImageArchiver] = None,
) -> SyncSummary:
    summary = SyncSummary()
    for item in items:
        result = upsert_product(item.product, gateway)
        summary.counts[result] += 1

        if archiver is not None and item.image_url and result is UpsertResponse.NewProduct:
            if archiver.archive(item.image_url, item.product):
                summary.images_archived += 1

    logger.info("Synced %d products (%d failed)", summary.total, summary.failed)
    return summary


def build_archiver(settings: Settings, client, images_dir: Optional[Path]) -> ImageArchiver:
    local_dir = images_dir or settings.image_dir
    if local_dir is not None:
        return LocalImageArchiver(local_dir, timeout_seconds=settings.http_timeout_seconds)
    return SupabaseImageArchiver(
        client,
        bucket=settings.image_bucket,
        cache_seconds=settings.image_cache_seconds,
        timeout_seconds=settings.http_timeout_seconds,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Upsert scraped products into Supabase.")
    parser.add_argument("file", type=Path, help="JSON Lines file of scraped products")
    images = parser.add_mutually_exclusive_group()
    images.add_argument("--images-dir", type=Path, help="write images here instead of Supabase Storage")
    images.add_argument("--no-images", action="store_true", help="skip image archiving")
    parser.add_argument("--limit", type=int, default=None, help="only sync the first N products")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if not args.file.exists():
        print(f"Sync failed: {args.file} does not exist", file=sys.stderr)
        return 1

    try:
        settings = get_settings()
        client = get_supabase()
    except RuntimeError as exc:
        print("Sync failed:", exc, file=sys.stderr)
        return 1

    logging.basicConfig(level=settings.log_level.upper())

    gateway = ProductGateway(client, table=settings.table)
    archiver = None if args.no_images else build_archiver(settings, client, args.images_dir)

    items = read_products(args.file)
    if args.limit is not None:
        items = itertools.islice(items, args.limit)

    print(f"[INIT] Syncing products from {args.file}")
    summary = sync_products(items, gateway, archiver)
    change_log.log_summary(summary.as_dict())
    return 1 if summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())

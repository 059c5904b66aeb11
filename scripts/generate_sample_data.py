#!/usr/bin/env python3
"""Generate a sample listings table for the local backend.

Writes the listings in the local table's record shape into the data
directory, where ``LocalPropertyRepository`` picks them up.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from homefinder.config import HomeFinderConfig
from homefinder.generators import PropertyGenerator
from homefinder.logging import get_logger, setup_logging
from homefinder.persistence import JsonFileStore
from homefinder.repository import CanonicalNormalizer

logger = get_logger("homefinder.scripts.generate_sample_data")


async def write_listings(output_dir: Path, count: int, seed: int, key: str, pretty: bool) -> int:
    """Generate ``count`` listings and store them under ``key``."""
    generator = PropertyGenerator(seed=seed)
    normalizer = CanonicalNormalizer()
    records = [normalizer.denormalize(prop) for prop in generator.generate_batch(count)]

    store = JsonFileStore(output_dir, pretty=pretty)
    await store.init()
    await store.write_all(key, records)
    logger.info(
        "Saved %d listings to %s", len(records), store.path_for(key),
        extra={"key": key, "count": len(records)},
    )
    return len(records)


def main() -> None:
    """Main entry point."""
    config = HomeFinderConfig.from_env()

    parser = argparse.ArgumentParser(description="Generate sample property listings")
    parser.add_argument(
        "--count",
        type=int,
        default=48,
        help="Number of listings to generate (default: 48)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=config.storage.data_dir,
        help=f"Data directory (default: {config.storage.data_dir})",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print the JSON output",
    )
    args = parser.parse_args()

    setup_logging(config.log_level, config.log_format)
    asyncio.run(
        write_listings(
            args.output_dir,
            args.count,
            args.seed,
            config.storage.properties_key,
            args.pretty or config.storage.pretty_json,
        )
    )


if __name__ == "__main__":
    main()

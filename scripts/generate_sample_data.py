#!/usr/bin/env python3
"""Seed a JSON data directory with demo accounts and payments.

The generated accounts and their passwords are printed so the demo can be
logged into.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from community_fees.config import AppConfig, StorageConfig
from community_fees.generators import DemoDataGenerator
from community_fees.logging import configure_from
from community_fees.storage import JsonFileStorage
from community_fees.store import CommunityDataStore


def main() -> None:
    """Generate demo data into ``--output``."""
    parser = argparse.ArgumentParser(description="Seed community-fees demo data.")
    parser.add_argument(
        "--output",
        type=Path,
        default=project_root / "local",
        help="Data directory to write (default: ./local)",
    )
    parser.add_argument("--residents", type=int, default=20, help="EXT accounts to create")
    parser.add_argument("--staff", type=int, default=2, help="KEEP accounts to create")
    parser.add_argument("--payments", type=int, default=40, help="Payment records to create")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    config = AppConfig(
        storage=StorageConfig(backend="json", data_dir=args.output),
        seed=args.seed,
        log_level=args.log_level,
    )
    configure_from(config)
    store = CommunityDataStore(storage=JsonFileStorage(args.output, pretty=True), config=config)
    store.load()

    accounts = DemoDataGenerator(seed=args.seed).populate(
        store,
        num_residents=args.residents,
        num_staff=args.staff,
        num_payments=args.payments,
    )

    print("=" * 60)
    print(f"Demo data written to: {args.output}")
    print("=" * 60)
    for name, count in store.summary().items():
        print(f"  {name}: {count}")
    print("\nAccounts:")
    print(f"  {config.admin.username} / {config.admin.password} (ADMIN)")
    for account in accounts:
        print(f"  {account.user.username} / {account.password} ({account.user.role.value})")


if __name__ == "__main__":
    main()

"""
Product Catalog

CLI entry point for loading, reviewing, reporting and snapshotting the catalog.
"""

import argparse
import logging
import sys
from datetime import date, timedelta
from decimal import Decimal

from catalog.manager import CatalogManager
from catalog.models.rating import Rating
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE, encoding="utf-8")
        ]
    )


def seed_demo_catalog(manager: CatalogManager) -> None:
    """Populate the catalog with the sample shop items and reviews."""
    today = date.today()

    manager.create_standard(101, "Tea", Decimal("1.99"))
    manager.review(101, Rating.FOUR_STAR, "Nice hot cup of tea")
    manager.review(101, Rating.TWO_STAR, "Rather weak tea")
    manager.review(101, Rating.FOUR_STAR, "Fine tea")
    manager.review(101, Rating.FOUR_STAR, "Good tea")
    manager.review(101, Rating.FIVE_STAR, "Perfect tea")
    manager.review(101, Rating.THREE_STAR, "Just add some lemon")

    manager.create_standard(102, "Coffee", Decimal("1.99"))
    manager.review(102, Rating.THREE_STAR, "Coffee was ok")
    manager.review(102, Rating.ONE_STAR, "Where is the milk?!")
    manager.review(102, Rating.FIVE_STAR, "It's perfect with ten spoons of sugar!")

    manager.create_perishable(103, "Cake", Decimal("3.99"), Rating.NOT_RATED, today + timedelta(days=2))
    manager.review(103, Rating.FIVE_STAR, "Very nice cake")
    manager.review(103, Rating.FOUR_STAR, "It good, but I've expected more chocolate")
    manager.review(103, Rating.FIVE_STAR, "This cake is perfect!")

    manager.create_perishable(104, "Cookie", Decimal("2.99"), Rating.NOT_RATED, today)
    manager.review(104, Rating.THREE_STAR, "Just another cookie")
    manager.review(104, Rating.THREE_STAR, "Ok")

    manager.create_standard(105, "Hot Chocolate", Decimal("2.50"))
    manager.review(105, Rating.FOUR_STAR, "Tasty!")
    manager.review(105, Rating.FOUR_STAR, "No bad at all")

    manager.create_perishable(106, "Chocolate", Decimal("2.50"), Rating.NOT_RATED, today + timedelta(days=3))
    manager.review(106, Rating.TWO_STAR, "Too sweet")
    manager.review(106, Rating.THREE_STAR, "Better than cookie")
    manager.review(106, Rating.TWO_STAR, "Too bitter")
    manager.review(106, Rating.ONE_STAR, "I don't get it!")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Product Catalog - reviews, reports and discounts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Seed the sample shop, write a report for item 106 and save everything
  python main.py --demo --report 106 --save

  # List items under 2.00 in French
  python main.py --locale fr-FR --max-price 2.00

  # Snapshot the catalog, then restore it on the next run
  python main.py --dump
  python main.py --restore
        """
    )

    parser.add_argument(
        "--locale",
        default=settings.DEFAULT_LOCALE,
        help=f"Output locale, one of {', '.join(CatalogManager.supported_locales())} "
             f"(default: {settings.DEFAULT_LOCALE})"
    )

    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Item data directory (default: {settings.DATA_ROOT})"
    )

    parser.add_argument(
        "--reports-root",
        default=str(settings.REPORTS_ROOT),
        help=f"Reports and review files directory (default: {settings.REPORTS_ROOT})"
    )

    parser.add_argument(
        "--temp-root",
        default=str(settings.TEMP_ROOT),
        help=f"Snapshot directory (default: {settings.TEMP_ROOT})"
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Add the sample shop items and reviews"
    )

    parser.add_argument(
        "--report",
        type=int,
        action="append",
        default=[],
        metavar="ID",
        help="Write the report file for an item (repeatable)"
    )

    parser.add_argument(
        "--max-price",
        type=Decimal,
        help="Only list items priced below this amount"
    )

    parser.add_argument(
        "--save",
        action="store_true",
        help="Write the catalog back to data and review files"
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--dump",
        action="store_true",
        help="Write a snapshot of the catalog and clear it"
    )
    group.add_argument(
        "--restore",
        action="store_true",
        help="Restore the catalog from a snapshot before listing"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    args = parser.parse_args()

    # Setup logging
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    # Print banner
    print("=" * 60)
    print("Product Catalog")
    print("=" * 60)
    print(f"Locale: {args.locale}")
    print(f"Data: {args.data_root}")
    print(f"Reports: {args.reports_root}")
    print("=" * 60)
    print()

    try:
        manager = CatalogManager(
            locale_tag=args.locale,
            data_root=args.data_root,
            reports_root=args.reports_root,
            temp_root=args.temp_root
        )

        if args.restore and not manager.restore():
            print("⚠️  No snapshot restored")

        if args.demo:
            seed_demo_catalog(manager)

        for item_id in args.report:
            report_path = manager.report(item_id)
            if report_path:
                print(f"Report: {report_path}")

        predicate = None
        if args.max_price is not None:
            predicate = lambda item: item.price < args.max_price

        print(manager.list_items(predicate, key=lambda item: item.rating, reverse=True))
        print()

        for stars, discount in manager.discount_totals().items():
            print(f"{stars or '-'}\t{discount}")

        if args.save:
            manager.save_all()

        if args.dump:
            snapshot_path = manager.dump()
            if snapshot_path is None:
                print("\n❌ Dump failed, see log for details")
                sys.exit(1)
            print(f"\nSnapshot: {snapshot_path}")

        logger.info("Catalog run completed successfully")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\n⚠️  Interrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Catalog run failed: {e}", exc_info=True)
        print(f"\n❌ Catalog run failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()

import argparse
import logging
import os
import sys

# Make the project root importable when run as a plain script
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from ehentai import EhError, Explorer

# Import unified configuration
try:
    from config import SEARCH_LOG_FILE, LOG_LEVEL
except ImportError:
    SEARCH_LOG_FILE = None
    LOG_LEVEL = 'INFO'

from ehentai.utils.logging_config import setup_logging, get_logger

logger = get_logger(__name__)


def non_negative_int(value):
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Search E-Hentai galleries and list the results')

    parser.add_argument('keyword', type=str,
                        help="Search text, e.g. 'language:korean'")

    parser.add_argument('--skip', type=non_negative_int, default=0,
                        help='Number of result pages to skip (default: 0)')

    parser.add_argument('--pages', type=int, default=1,
                        help='Maximum number of result pages to list (default: 1)')

    parser.add_argument('--resolve', type=int, metavar='N',
                        help='Also load the N-th listed gallery (0-based) with all its image links')

    parser.add_argument('--log-level', type=str, default=LOG_LEVEL,
                        help=f'Log level (default: {LOG_LEVEL})')

    return parser.parse_args(argv)


def main(argv=None):
    args = parse_arguments(argv)
    setup_logging(SEARCH_LOG_FILE, args.log_level)

    with Explorer.from_config() as explorer:
        pager = explorer.search(args.keyword).skip(args.skip)
        listed = []
        try:
            for batch in pager.iter_batches(max_pages=args.pages):
                for summary in batch:
                    print(f"[{len(listed)}] {summary.title}")
                    listed.append(summary)
        except EhError as e:
            logger.error(f"Search stopped at page {pager.page}: {e}")
            return 1

        logger.info(f"Listed {len(listed)} galleries "
                    f"(total results: {pager.result_count}, pages: {pager.page_count})")

        if args.resolve is None:
            return 0
        if not 0 <= args.resolve < len(listed):
            logger.error(f"--resolve {args.resolve} is outside the {len(listed)} listed galleries")
            return 1

        try:
            article = explorer.article(listed[args.resolve])
            article.load_image_list()
        except EhError as e:
            logger.error(f"Could not load gallery: {e}")
            return 1

        meta = article.meta
        print(f"{meta.title} ({meta.kind.label}, {meta.language}, {meta.length} pages, "
              f"rating {meta.rating} from {meta.rating_count})")
        for index, link in enumerate(article.image_pages):
            print(f"  {index + 1:4d} {link}")
    return 0


if __name__ == '__main__':
    logging.captureWarnings(True)
    sys.exit(main())

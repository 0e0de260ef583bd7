import logging
import sys

from .cli import run_cli
from .errors import NeriError

logger = logging.getLogger(__name__)


def main():
    """Main entry point for neri. Exits with the code returned by the CLI."""
    try:
        sys.exit(run_cli())
    except KeyboardInterrupt:
        logger.info("Cancelled by user")
        print("\nCancelled by user")
        sys.exit(130)  # 128 + SIGINT
    except NeriError as e:
        # expected failures: report them without a traceback
        logger.error(f"neri error: {e}")
        print(f"neri: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Unhandled exception: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

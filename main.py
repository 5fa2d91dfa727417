import sys

from pretty_ts_errors.app import main

if __name__ == "__main__":
    sys.exit(main())

import sys

from .hashbang import main

if __name__ == "__main__":
    sys.exit(main())

import sys

from stream_watcher.app import main

if __name__ == "__main__":
    sys.exit(main())

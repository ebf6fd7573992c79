import sys

from oscleaner.cli import main

sys.exit(main())

import sys

from nextasset.cli import main

sys.exit(main())

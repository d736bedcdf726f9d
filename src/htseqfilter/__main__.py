import sys

from htseqfilter.cli import main

sys.exit(main())

import sys

from pqconsolidator.cli import main

sys.exit(main())

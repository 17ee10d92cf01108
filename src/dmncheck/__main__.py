import sys

from dmncheck.cli import main

sys.exit(main())

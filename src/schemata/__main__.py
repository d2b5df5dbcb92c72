import sys

from schemata.cli import main

sys.exit(main())

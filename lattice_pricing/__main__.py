import sys

from lattice_pricing.cli import main

sys.exit(main())

import sys

from trailswap.main import main

sys.exit(main())

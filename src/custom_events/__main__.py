import sys

from custom_events.cli import main

sys.exit(main())

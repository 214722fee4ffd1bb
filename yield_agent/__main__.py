import sys

from yield_agent.cli import main

sys.exit(main())

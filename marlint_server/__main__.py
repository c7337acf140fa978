import sys

from marlint_server.cli.main import main

sys.exit(main())

import sys

from toolbridge.ui.cli.app import main

sys.exit(main())

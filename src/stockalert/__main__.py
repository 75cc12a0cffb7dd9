import sys

from stockalert.cli import main

sys.exit(main())

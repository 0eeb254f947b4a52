import sys

from mangakit.cli import main

sys.exit(main())

import sys

from decompiler.cli import main

sys.exit(main())

import sys

from mdx2vast.cli import main

sys.exit(main())

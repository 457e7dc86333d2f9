import sys

from db_table_diff.cli import main

sys.exit(main())

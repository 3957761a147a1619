"""Allow ``python -m editorial_reviews.cli`` execution."""

import sys

from editorial_reviews.cli.lookup import main

sys.exit(main())

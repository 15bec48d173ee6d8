"""Allow ``python -m ci_gen``."""

from ci_gen.cli import main

raise SystemExit(main())

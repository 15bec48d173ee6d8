"""Allow ``python -m protoc_bin_vendored``."""

from protoc_bin_vendored.cli import main

raise SystemExit(main())

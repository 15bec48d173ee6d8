"""Exit codes for the protoc-bin-vendored CLI.

- 0: Success
- 1: Unsupported platform (no bundle for this os/arch)
- 2: Bundle missing or inconsistent
- 3: Invalid usage (bad arguments)
- 4: Update failure (download or extraction failed)
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_UNSUPPORTED_PLATFORM = 1
EXIT_BUNDLE_ERROR = 2
EXIT_INVALID_USAGE = 3
EXIT_UPDATE_FAILURE = 4

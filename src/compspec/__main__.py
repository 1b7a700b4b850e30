"""Allow ``python -m compspec``.

Error handling lives in :func:`compspec.app.main`, the same function the
console script calls.
"""

from __future__ import annotations

from compspec.app import main


if __name__ == "__main__":
    main()

"""Module entrypoint.

Allows:
    python -m fingers_crossed
"""

from __future__ import annotations

from fingers_crossed.server.log_server import main

if __name__ == "__main__":
    main()

from __future__ import annotations

from fiveby_client.cli.__main__ import main

if __name__ == "__main__":
    raise SystemExit(main())

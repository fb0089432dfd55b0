from __future__ import annotations

from exe_to_msi.main import main

if __name__ == "__main__":
    raise SystemExit(main())

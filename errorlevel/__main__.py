"""Allow ``python -m errorlevel``."""

from errorlevel.main import main

if __name__ == "__main__":
    raise SystemExit(main())

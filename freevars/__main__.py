"""Allow ``python -m freevars``; see :mod:`freevars.main`."""

from freevars.main import main

if __name__ == "__main__":
    raise SystemExit(main())

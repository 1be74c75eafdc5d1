# manifestation/__main__.py
from manifestation.cli import main

if __name__ == "__main__":
    raise SystemExit(main())

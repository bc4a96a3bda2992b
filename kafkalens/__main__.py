"""Allow ``python -m kafkalens``."""

from kafkalens.main import main

raise SystemExit(main())

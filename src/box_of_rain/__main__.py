"""Allow ``python -m box_of_rain``."""

from box_of_rain.cli import main

raise SystemExit(main())

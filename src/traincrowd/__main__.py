"""Run the dashboard with ``python -m traincrowd``."""

from traincrowd.cli import main

raise SystemExit(main())

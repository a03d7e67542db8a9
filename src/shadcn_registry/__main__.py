from __future__ import annotations

from shadcn_registry.cli import main

raise SystemExit(main())

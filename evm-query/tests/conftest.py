from __future__ import annotations

import sys
from pathlib import Path

# scripts/ is a flat module directory, same as when the commands run directly
SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPTS) not in sys.path:
    sys.path.insert(0, str(SCRIPTS))

#!/usr/bin/env python3
"""Launcher for the Stewardship Planner dashboard.

Runs Streamlit on stewardship_planner/dashboard.py from the project root so
the package imports resolve without installing it.
"""

import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.resolve()
app_path = project_root / "stewardship_planner" / "dashboard.py"

if __name__ == "__main__":
    subprocess.run(
        [sys.executable, "-m", "streamlit", "run", str(app_path), *sys.argv[1:]],
        cwd=project_root,
    )

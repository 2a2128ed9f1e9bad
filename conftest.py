# Ensure the project root and src/ are on sys.path so 'ircengine' and the
# 'tests' fixtures package import when running pytest without installing.
import sys
from pathlib import Path

ROOT = Path(__file__).parent.resolve()
for path in (ROOT, ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

"""
Pytest configuration for widepath tests.
Adds src/ (for `import widepath`) and the repository root (for
`from tests.test_fixtures import ...`) to sys.path.
"""
import sys
from pathlib import Path

_root = Path(__file__).parent.parent
for path in (_root / "src", _root):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

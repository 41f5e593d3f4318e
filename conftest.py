"""
Pytest configuration for the Aptos Move scripts.

Puts the project root on sys.path so that `import aptos_move_scripts`
works without installing the package.
"""

import sys
from pathlib import Path

_current_dir = Path(__file__).resolve().parent
if str(_current_dir) not in sys.path:
    sys.path.insert(0, str(_current_dir))

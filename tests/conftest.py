"""Pytest configuration for the cppjava test suite."""

import sys
from pathlib import Path

# Add the checkout root to path so cppjava imports without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

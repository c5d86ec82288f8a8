"""Test configuration for pytest.

Ensure the repository root is on sys.path so tests can import the `cachesim`
package without needing PYTHONPATH set externally.
"""
import os
import sys

import pytest

# Compute project root: two directories above this file (cachesim/tests -> cachesim -> project root)
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture
def counting_ram():
    """256-byte RAM where every byte holds its own address."""
    from cachesim.core.memory import RAM
    return RAM.from_bytes(bytes(range(256)))

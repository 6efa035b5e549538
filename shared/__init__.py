"""Project file format constants.

Kept outside domain/ and src/ so the persistence adapter and the tests can
both pin the exported key layout without importing each other.
"""

from __future__ import annotations

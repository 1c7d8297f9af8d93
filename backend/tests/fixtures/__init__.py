"""Test fixtures for SRM Ops.

Provides:
- In-memory database engine and sessions
- Sample record payloads and ORM builders
- Fakes for the mail relay and photo storage
"""

from .records import *
from .services import *

# tests/conftest.py
import os
import sys
import logging
from pathlib import Path

# Make the src layout importable without an installed package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

# Keep a developer's .env from selecting another backend during tests
os.environ.setdefault("DB_BACKEND", "direct")

# Configure minimal logging for tests
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Disable SQLAlchemy INFO messages during tests
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

import sys
from pathlib import Path

# Ensure backend package is importable in serverless environment.
BASE_DIR = Path(__file__).resolve().parents[1]
BACKEND_DIR = BASE_DIR / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from gsc_site.main import app  # noqa: E402

__all__ = ["app"]

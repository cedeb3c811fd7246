import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent))

# Keep the developer's .env and shell from leaking into test settings
for _key in ("GST_NUMBER", "HOME_STATE_CODE", "SERVICE_CHARGE_RATE", "DEFAULT_TAX_RATE"):
    os.environ.pop(_key, None)
os.environ.setdefault("LOG_LEVEL", "INFO")


@pytest.fixture(autouse=True)
def _fresh_settings():
    from config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

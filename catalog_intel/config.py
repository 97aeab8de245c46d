from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()  # must run before the os.getenv calls below

from catalog_intel.services.reference import DEFAULT_FOCUS_BRAND, DEFAULT_RIVALS

BASE_DIR = Path(__file__).resolve().parent.parent


def _rivals(raw: str) -> List[str]:
    return [s.strip() for s in raw.split(",") if s.strip()]


STATE_SOURCE = os.getenv("STATE_SOURCE", str(BASE_DIR / "data" / "state.json"))
OUTPUT_PATH = Path(os.getenv("OUTPUT_PATH", str(BASE_DIR / "data" / "products.json")))
FOCUS_BRAND = os.getenv("FOCUS_BRAND", DEFAULT_FOCUS_BRAND).strip()
RIVAL_BRANDS = _rivals(os.getenv("RIVAL_BRANDS", ",".join(DEFAULT_RIVALS)))
FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "25"))

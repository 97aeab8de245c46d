from __future__ import annotations

import json
import time
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import JSONResponse

from catalog_intel import config
from catalog_intel.services.fetch import load_state
from catalog_intel.services.normalize import FeedError
from catalog_intel.services.prepare import prepare_dashboard_data, write_document
from catalog_intel.services.reference import sort_brands


app = FastAPI(title="catalog-intel")


def read_document() -> Dict[str, Any]:
    path = config.OUTPUT_PATH
    if not path.exists():
        raise HTTPException(status_code=404, detail="No dashboard document yet. POST /prepare to build one.")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


@app.get("/health")
def health():
    return {"ok": True, "document": config.OUTPUT_PATH.exists()}


@app.post("/prepare")
def prepare(payload: Optional[Dict[str, Any]] = Body(None)):
    """
    Rebuild the dashboard document from the configured state feed.
    Optional JSON body: {"focus": "<slug>", "rivals": ["<slug>", ...]}
    """
    payload = payload or {}
    focus = payload.get("focus") or config.FOCUS_BRAND
    rivals = payload.get("rivals") or list(config.RIVAL_BRANDS)
    if not isinstance(focus, str):
        raise HTTPException(status_code=422, detail="focus must be a brand slug string.")
    if not isinstance(rivals, list) or not all(isinstance(r, str) for r in rivals):
        raise HTTPException(status_code=422, detail="rivals must be a list of brand slug strings.")

    t0 = time.time(); print("START prepare:", config.STATE_SOURCE)

    try:
        t = time.time(); state = load_state(config.STATE_SOURCE, timeout=config.FETCH_TIMEOUT); print("LOAD seconds:", round(time.time() - t, 2))
        t = time.time(); doc = prepare_dashboard_data(state, focus_brand=focus, rivals=rivals); print("PREPARE seconds:", round(time.time() - t, 2))
    except FeedError as e:
        raise HTTPException(status_code=422, detail=str(e))

    t = time.time(); write_document(doc, config.OUTPUT_PATH); print("WRITE seconds:", round(time.time() - t, 2), config.OUTPUT_PATH)
    print("TOTAL seconds:", round(time.time() - t0, 2), "insights:", len(doc["insights"]))

    return JSONResponse(doc)


@app.get("/data")
def data():
    return JSONResponse(read_document())


@app.get("/brands")
def brands():
    doc = read_document()
    listed = doc.get("brands") or {}
    return [
        {"slug": slug, "name": listed[slug]["name"], "total": listed[slug]["total"]}
        for slug in sort_brands(listed)
    ]


@app.get("/brands/{slug}")
def brand(slug: str):
    doc = read_document()
    stats = (doc.get("brands") or {}).get(slug)
    if stats is None:
        raise HTTPException(status_code=404, detail=f"Unknown brand: {slug}")

    return {
        **stats,
        "profile": (doc.get("brandProfiles") or {}).get(slug, {}),
        "launches": (doc.get("launchSummary") or {}).get(slug, {}),
        "velocity": (doc.get("launchVelocity") or {}).get(slug, {}),
    }

from __future__ import annotations

import os

from fastapi import FastAPI, HTTPException

from collector.collect import collect
from collector.config import ScanOptions
from collector.model import CollectResult


app = FastAPI(title="Model Collector")


@app.post("/collect", response_model=CollectResult)
def collect_models(req: ScanOptions) -> CollectResult:
	root = os.path.abspath(req.source)
	if not os.path.isdir(root):
		raise HTTPException(status_code=400, detail=f"Invalid source: {root}")
	return collect(req.model_copy(update={"source": root}))

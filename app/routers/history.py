"""Scan history endpoints: list, inspect, delete and export past scans."""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import PlainTextResponse

from app.models.response import HistoryResponse
from app.models.scan import ScanRecord
from app.services.history import HistoryStore, get_history_store
from app.services.report import to_csv, to_json

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/history", tags=["History"])


def _attachment(body: str, media_type: str, filename: str) -> Response:
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _get_or_404(store: HistoryStore, record_id: str) -> ScanRecord:
    record = store.get(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Scan not found.")
    return record


@router.get("", response_model=HistoryResponse, summary="List saved scans, newest first")
async def list_history(store: HistoryStore = Depends(get_history_store)) -> HistoryResponse:
    records = store.list()
    return HistoryResponse(capacity=store.capacity, count=len(records), records=records)


@router.get("/export.csv", response_class=PlainTextResponse, summary="Export all saved scans as CSV")
async def export_history_csv(store: HistoryStore = Depends(get_history_store)) -> Response:
    return _attachment(to_csv(store.list()), "text/csv", "seo-history.csv")


@router.get("/{record_id}", response_model=ScanRecord, summary="Get a saved scan")
async def get_scan(record_id: str, store: HistoryStore = Depends(get_history_store)) -> ScanRecord:
    return _get_or_404(store, record_id)


@router.get("/{record_id}/export", summary="Download a saved scan as JSON or CSV")
async def export_scan(
    record_id: str,
    format: Literal["json", "csv"] = Query(default="json", description="Output format: 'json' or 'csv'."),
    store: HistoryStore = Depends(get_history_store),
) -> Response:
    record = _get_or_404(store, record_id)
    if format == "csv":
        return _attachment(to_csv([record]), "text/csv", f"seo-report-{record.id}.csv")
    return _attachment(to_json(record), "application/json", f"seo-report-{record.id}.json")


@router.delete("/{record_id}", status_code=204, summary="Delete a saved scan")
async def delete_scan(record_id: str, store: HistoryStore = Depends(get_history_store)) -> Response:
    if not store.remove(record_id):
        raise HTTPException(status_code=404, detail="Scan not found.")
    logger.info("Deleted scan %s from history", record_id)
    return Response(status_code=204)

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from datetime import datetime
from dependencies import get_store, get_now, get_value_metric, get_low_stock_rule, get_recent_limit
from schemas.analytics import LowStockRule, ValueMetric
from crud import inventory, reports
from store import InventoryStore

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/export")
def export_inventory_report(
    format: str = Query("pdf", pattern="^(pdf|excel)$"),
    store: InventoryStore = Depends(get_store),
    now: datetime = Depends(get_now),
    metric: ValueMetric = Depends(get_value_metric),
    low_stock_rule: LowStockRule = Depends(get_low_stock_rule),
    recent_limit: int = Depends(get_recent_limit),
):
    """
    Download the classified inventory with its analytics summary as PDF or Excel
    """
    listing = inventory.list_classified_items(store, now, metric)
    summary = inventory.get_inventory_analytics(store, now, metric, low_stock_rule, recent_limit)
    filename = f"inventory-report-{now.strftime('%Y-%m-%d')}"

    try:
        if format == "pdf":
            content = reports.generate_pdf_report(listing.items, summary, now)
            filename = f"{filename}.pdf"
            media_type = "application/pdf"
        else:
            content = reports.generate_excel_report(listing.items, summary, now)
            filename = f"{filename}.xlsx"
            media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    except (OSError, ValueError) as e:
        logger.exception("Error generating %s inventory report", format)
        raise HTTPException(status_code=500, detail=f"Error generating report: {str(e)}")

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )

from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from core.database import get_db
from modules.reports import schemas, service
from modules.reports.excel import build_sales_report_excel

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/sales", response_model=schemas.SalesReport)
def sales_report_endpoint(date_from: date, date_to: date, db: Session = Depends(get_db)):
    return service.sales_report(db, date_from, date_to)


@router.get("/top-products", response_model=list[schemas.TopProduct])
def top_products_endpoint(date_from: date, date_to: date, db: Session = Depends(get_db)):
    return service.top_products(db, date_from, date_to)


@router.get("/sales/excel")
def download_sales_report_excel(date_from: date, date_to: date, db: Session = Depends(get_db)):
    report = service.sales_report(db, date_from, date_to)
    products = service.top_products(db, date_from, date_to)
    stream = build_sales_report_excel(report, products)
    filename = f"sales_{date_from.isoformat()}_{date_to.isoformat()}.xlsx"
    return StreamingResponse(
        stream,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )

"""FastAPI application factory."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import __version__, crud, schemas, service
from .config import get_settings
from .database import init_database
from .dependencies import get_db
from .sources import DataAccessError

logger = logging.getLogger(__name__)


def _failure(exc: Exception) -> JSONResponse:
    payload = schemas.FailureResponse(error=str(exc))
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload.model_dump())


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    init_database()

    app = FastAPI(title=settings.app_name, version=__version__)
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health", tags=["system"])
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(
        "/inventory/recalculate",
        response_model=schemas.RecalculationResponse,
        response_model_exclude_none=True,
        responses={500: {"model": schemas.FailureResponse}},
        tags=["inventory"],
    )
    def recalculate(db: Session = Depends(get_db)):
        try:
            return service.recalculate_inventory(db)
        except DataAccessError as exc:
            logger.error("Error recalculating inventory: %s", exc)
            return _failure(exc)

    @app.get(
        "/inventory/stock-levels",
        response_model=schemas.StockLevelsResponse,
        responses={500: {"model": schemas.FailureResponse}},
        tags=["inventory"],
    )
    def get_stock_levels(db: Session = Depends(get_db)):
        try:
            return schemas.StockLevelsResponse(data=service.calculate_stock_levels(db))
        except DataAccessError as exc:
            logger.error("Error calculating stock levels: %s", exc)
            return _failure(exc)

    @app.get("/inventory/snapshots", response_model=list[schemas.SnapshotRead], tags=["inventory"])
    def list_snapshots(
        item_id: Optional[str] = None,
        store_id: Optional[str] = None,
        db: Session = Depends(get_db),
    ):
        return crud.list_snapshots(db, item_id=item_id, store_id=store_id)

    @app.post(
        "/inventory/adjustments",
        response_model=schemas.AdjustmentRead,
        status_code=status.HTTP_201_CREATED,
        tags=["inventory"],
    )
    def record_adjustment(payload: schemas.AdjustmentCreate, db: Session = Depends(get_db)):
        try:
            return crud.record_adjustment(db, payload)
        except crud.NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @app.post("/items", response_model=schemas.ItemRead, status_code=status.HTTP_201_CREATED, tags=["catalog"])
    def create_item(payload: schemas.ItemCreate, db: Session = Depends(get_db)):
        try:
            return crud.create_item(db, payload)
        except crud.DuplicateRecordError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    @app.post("/stores", response_model=schemas.StoreRead, status_code=status.HTTP_201_CREATED, tags=["catalog"])
    def create_store(payload: schemas.StoreCreate, db: Session = Depends(get_db)):
        return crud.create_store(db, payload)

    @app.post(
        "/transfers",
        response_model=schemas.TransferRead,
        status_code=status.HTTP_201_CREATED,
        tags=["transfers"],
    )
    def create_transfer(payload: schemas.TransferCreate, db: Session = Depends(get_db)):
        try:
            transfer = crud.create_transfer(db, payload)
        except crud.NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        except crud.DuplicateRecordError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        return schemas.TransferRead.model_validate(transfer)

    @app.post(
        "/purchase-orders",
        response_model=schemas.PurchaseOrderRead,
        status_code=status.HTTP_201_CREATED,
        tags=["purchase-orders"],
    )
    def create_purchase_order(payload: schemas.PurchaseOrderCreate, db: Session = Depends(get_db)):
        try:
            order = crud.create_purchase_order(db, payload)
        except crud.NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        except crud.DuplicateRecordError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        return schemas.PurchaseOrderRead.model_validate(order)

    return app

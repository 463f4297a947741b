from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime, timezone
import logging
import math

from display_shares import DisplayShares, SalonPolicy, calculate_display_shares
from guarantee import calculate_guaranteed_amount, calculate_topup_amount
from percentages import SplitPercentages, normalize_percentages
from settlement_config import get_settings
from shift import (
    CloseShiftItem,
    CloseShiftResult,
    PaymentMode,
    ShiftFinancials,
    StaffFinanceSettings,
    StaffShiftSnapshot,
    calculate_shift_financials,
    close_staff_shift,
)

settings = get_settings()

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Staff Settlement API")

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic models
class PercentagesRequest(BaseModel):
    percent_master: float
    percent_salon: float

class GuaranteeRequest(BaseModel):
    hours_worked: Optional[float] = None
    hourly_rate: Optional[float] = None

class GuaranteeResponse(BaseModel):
    guaranteed_amount: float

class TopupRequest(BaseModel):
    guaranteed_amount: float
    base_share: float

class TopupResponse(BaseModel):
    topup_amount: float

class DisplaySharesRequest(BaseModel):
    master_base: float
    salon_base: float
    guaranteed_amount: Optional[float] = None
    is_open_shift: bool
    salon_policy: SalonPolicy = "forfeit"

class ShiftFinancialsRequest(BaseModel):
    total_amount: float
    total_consumables: float = 0.0
    percent_master: Optional[float] = None
    percent_salon: Optional[float] = None
    hours_worked: Optional[float] = None
    hourly_rate: Optional[float] = None
    payment_mode: Optional[PaymentMode] = None

class CloseShiftRequest(BaseModel):
    now: Optional[datetime] = None
    staff: StaffFinanceSettings
    shift: Optional[StaffShiftSnapshot] = None
    items: List[CloseShiftItem] = []
    total_amount: float = 0.0
    consumables_amount: float = 0.0


def require_non_negative(name: str, value: Optional[float]):
    """Reject values the calculations would otherwise silently turn into defaults."""
    if value is None:
        return
    if not math.isfinite(value):
        raise HTTPException(status_code=400, detail=f"{name} must be a finite number")
    if value < 0:
        raise HTTPException(status_code=400, detail=f"{name} must not be negative")


@app.get("/")
def read_root():
    return {"message": "Staff Settlement API"}

@app.post("/percentages/normalize", response_model=SplitPercentages)
def normalize(request: PercentagesRequest):
    """
    Normalize a master/salon split so it sums to 100
    """
    require_non_negative("percent_master", request.percent_master)
    require_non_negative("percent_salon", request.percent_salon)
    return normalize_percentages(request.percent_master, request.percent_salon)

@app.post("/guarantee", response_model=GuaranteeResponse)
def guarantee(request: GuaranteeRequest):
    """
    Guaranteed amount for the hours worked at the hourly rate
    """
    require_non_negative("hours_worked", request.hours_worked)
    require_non_negative("hourly_rate", request.hourly_rate)
    amount = calculate_guaranteed_amount(request.hours_worked, request.hourly_rate)
    return GuaranteeResponse(guaranteed_amount=amount)

@app.post("/guarantee/topup", response_model=TopupResponse)
def topup(request: TopupRequest):
    """
    Shortfall between a guarantee and the base share earned
    """
    require_non_negative("guaranteed_amount", request.guaranteed_amount)
    require_non_negative("base_share", request.base_share)
    return TopupResponse(topup_amount=calculate_topup_amount(request.guaranteed_amount, request.base_share))

@app.post("/shares/display", response_model=DisplayShares)
def display_shares(request: DisplaySharesRequest):
    """
    Final shares to show for a shift, applying the guarantee to open shifts
    """
    require_non_negative("master_base", request.master_base)
    require_non_negative("salon_base", request.salon_base)
    require_non_negative("guaranteed_amount", request.guaranteed_amount)
    return calculate_display_shares(
        request.master_base,
        request.salon_base,
        request.guaranteed_amount,
        request.is_open_shift,
        salon_policy=request.salon_policy,
    )

@app.post("/shifts/financials", response_model=ShiftFinancials)
def shift_financials(request: ShiftFinancialsRequest):
    """
    Full settlement of a shift: base shares, guarantee, top-up and final shares
    """
    for name in ("total_amount", "total_consumables", "percent_master", "percent_salon", "hours_worked", "hourly_rate"):
        require_non_negative(name, getattr(request, name))

    percent_master = request.percent_master if request.percent_master is not None else settings.default_percent_master
    percent_salon = request.percent_salon if request.percent_salon is not None else settings.default_percent_salon
    payment_mode = request.payment_mode or PaymentMode(settings.default_payment_mode)

    return calculate_shift_financials(
        request.total_amount,
        request.total_consumables,
        percent_master,
        percent_salon,
        request.hours_worked,
        request.hourly_rate,
        payment_mode=payment_mode,
    )

@app.post("/shifts/close", response_model=CloseShiftResult)
def close_shift(request: CloseShiftRequest):
    """
    Settle an open shift at close time
    """
    require_non_negative("total_amount", request.total_amount)
    require_non_negative("consumables_amount", request.consumables_amount)
    require_non_negative("hourly_rate", request.staff.hourly_rate)

    now = request.now or datetime.now(timezone.utc)
    try:
        result = close_staff_shift(
            now,
            request.staff,
            request.shift,
            request.items,
            total_amount_raw=request.total_amount,
            consumables_amount_raw=request.consumables_amount,
        )
    except Exception as e:
        logger.exception("Failed to close shift")
        raise HTTPException(status_code=500, detail=f"Error closing shift: {str(e)}")

    if result.kind == "no_shift":
        raise HTTPException(status_code=404, detail="No open shift found")
    if result.kind == "already_closed":
        raise HTTPException(status_code=409, detail="Shift is already closed")
    return result

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

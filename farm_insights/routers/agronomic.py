"""
Agronomic Classification Router.
Provides endpoints for soil interpretation, worked-hours bands and lease payment hints.
"""
from datetime import date, datetime
import logging
import math

from fastapi import APIRouter, HTTPException, Query

from farm_insights.schemas.agronomic_schemas import (
    SoilMeasurement,
    WorkedShift,
    NutrientLevelResponse,
    SoilClassificationResponse,
    PhClassificationResponse,
    SoilReportResponse,
    HoursClassificationResponse,
    LeasePaymentDueRequest,
    LeasePaymentDueResponse,
    UpcomingPaymentsRequest,
    UpcomingPaymentsResponse,
    LeasePaymentResponse,
)
from farm_insights.services.agronomic_classifier import (
    agronomic_classifier,
    UnknownNutrientError,
)
from farm_insights.services.lease_payment_service import (
    is_lease_payment_due,
    parse_frequency,
    upcoming_payments,
)
from farm_insights.services.soil_report_service import build_soil_report, nutrient_level_indicator
from farm_insights.services.timekeeping_service import (
    calculate_hours_worked,
    format_hours,
    is_overtime_shift,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/agronomic", tags=["agronomic"])


def _require_finite_measurement(measurement: SoilMeasurement):
    for field, value in measurement.model_dump(exclude={"sampled_on"}).items():
        if not math.isfinite(value):
            raise HTTPException(status_code=400, detail=f"{field} must be a finite number")


@router.post("/soil/classify", response_model=SoilClassificationResponse)
async def classify_soil(measurement: SoilMeasurement):
    """Classify pH, organic matter, phosphorus, potassium and CEC of a soil test."""
    _require_finite_measurement(measurement)
    results = agronomic_classifier.classify_soil(measurement)
    return {key: result.to_dict() for key, result in results.items()}


@router.post("/soil/report", response_model=SoilReportResponse)
async def soil_report(measurement: SoilMeasurement):
    """
    Build an interpreted soil test report.

    Returns per-section interpretation, recommendation and good/warning/poor status
    for pH, organic matter, nutrients and soil biology.
    """
    _require_finite_measurement(measurement)
    return build_soil_report(measurement).to_dict()


@router.get("/ph/{ph}", response_model=PhClassificationResponse)
async def classify_ph(ph: float):
    """Classify a pH value on the primary and simplified scales."""
    if not math.isfinite(ph):
        raise HTTPException(status_code=400, detail="pH must be a finite number")
    return {
        "classification": agronomic_classifier.classify_ph(ph).to_dict(),
        "simplified_severity": agronomic_classifier.classify_ph_simplified(ph).severity.value,
        "spectrum_position": agronomic_classifier.ph_spectrum_position(ph),
    }


@router.get("/nutrients/{nutrient}", response_model=NutrientLevelResponse)
async def classify_nutrient(nutrient: str, value: float = Query(...)):
    """
    Classify a nutrient level.

    Values beyond the nutrient ceiling return out_of_range=true rather than an error.
    """
    try:
        key = agronomic_classifier.resolve_nutrient(nutrient)
    except UnknownNutrientError:
        raise HTTPException(status_code=404, detail=f"Nutrient '{nutrient}' has no classification table")
    return nutrient_level_indicator(value, key)


@router.post("/hours/classify", response_model=HoursClassificationResponse)
async def classify_hours(shift: WorkedShift):
    """Overtime band and progress-ring geometry for a shift."""
    if shift.hours_worked is not None:
        hours = shift.hours_worked
    elif shift.clock_in is not None:
        hours = calculate_hours_worked(
            shift.clock_in, shift.clock_out, as_of=datetime.now(shift.clock_in.tzinfo)
        )
    else:
        raise HTTPException(status_code=400, detail="Either hours_worked or clock_in is required")

    if not math.isfinite(hours):
        raise HTTPException(status_code=400, detail="hours_worked must be a finite number")

    result = agronomic_classifier.classify_worked_hours(hours)
    return {
        "hours_worked": hours,
        "formatted": format_hours(hours),
        "band": result.band.value,
        "severity": result.severity.value,
        "color": result.color.value,
        "ring_angle_deg": agronomic_classifier.ring_angle_for_hours(hours),
        "ring_fraction": agronomic_classifier.ring_fraction_for_hours(hours),
        "is_overtime": is_overtime_shift(hours),
    }


@router.post("/leases/payment-due", response_model=LeasePaymentDueResponse)
async def lease_payment_due(request: LeasePaymentDueRequest):
    """Whether an active lease likely has a payment due this month."""
    as_of = request.as_of or date.today()
    return {
        "due": is_lease_payment_due(request.lease, as_of),
        "frequency": parse_frequency(request.lease.rent_frequency).value,
    }


@router.post("/leases/upcoming-payments", response_model=UpcomingPaymentsResponse)
async def lease_upcoming_payments(request: UpcomingPaymentsRequest):
    """Scheduled payments of active leases within the look-ahead window, by due date."""
    as_of = request.as_of or date.today()
    payments = upcoming_payments(request.leases, as_of, request.within_days)
    items = [
        LeasePaymentResponse(
            property_name=payment.lease.property_name,
            farmer_name=payment.lease.farmer_name,
            amount=round(payment.amount, 2),
            due_date=payment.due_date,
            frequency=payment.frequency.value,
            is_overdue=payment.is_overdue(as_of),
            is_upcoming=payment.is_upcoming(as_of),
        )
        for payment in payments
    ]
    return {"items": items, "total": len(items)}

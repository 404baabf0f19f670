"""
Pydantic schemas for the agronomic classification endpoints.
Includes input records (soil measurement, lease, shift) and classification responses.
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import date, datetime


# ==================== INPUT RECORDS ====================

class SoilMeasurement(BaseModel):
    """Soil test values as recorded by the lab."""
    ph: float = Field(..., ge=0, description="pH value (not clamped to 14)")
    organic_matter_pct: float = Field(..., ge=0, description="Organic matter %")
    phosphorus_ppm: float = Field(..., ge=0, description="P ppm")
    potassium_ppm: float = Field(..., ge=0, description="K ppm")
    cec: float = Field(..., ge=0, description="CEC meq/100g")
    sampled_on: Optional[date] = Field(None, description="Sampling date")

    class Config:
        from_attributes = True


class LeaseRecord(BaseModel):
    """Lease fields needed for payment hints."""
    rent_frequency: Optional[str] = Field(None, max_length=50, description="monthly, quarterly, semi_annual, annual")
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str = Field(..., max_length=20, description="active or inactive")
    rent_amount: Optional[float] = Field(None, ge=0, description="Annual rent")
    property_name: Optional[str] = Field(None, max_length=100)
    farmer_name: Optional[str] = Field(None, max_length=100)

    class Config:
        from_attributes = True


class WorkedShift(BaseModel):
    """A single worked shift."""
    hours_worked: Optional[float] = Field(None, ge=0, description="Recorded hours")
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None


# ==================== CLASSIFICATION RESPONSES ====================

class ClassificationResponse(BaseModel):
    """Band, severity and note for one value."""
    metric: str
    value: float
    band: Optional[str] = None
    severity: Optional[str] = None
    note: str
    color: Optional[str] = None
    out_of_range: bool = False


class NutrientLevelResponse(ClassificationResponse):
    interpretation: str


class SoilClassificationResponse(BaseModel):
    ph: ClassificationResponse
    organic_matter: ClassificationResponse
    phosphorus: ClassificationResponse
    potassium: ClassificationResponse
    cec: ClassificationResponse


class PhClassificationResponse(BaseModel):
    classification: ClassificationResponse
    simplified_severity: str
    spectrum_position: float


class ReportSectionResponse(BaseModel):
    title: str
    interpretation: str
    recommendation: str
    status: str


class SoilReportResponse(BaseModel):
    sampled_on: Optional[date] = None
    ph_spectrum_position: float
    classifications: Dict[str, ClassificationResponse]
    sections: Dict[str, ReportSectionResponse]


class HoursClassificationResponse(BaseModel):
    hours_worked: float
    formatted: str
    band: str
    severity: str
    color: str
    ring_angle_deg: float
    ring_fraction: float
    is_overtime: bool


# ==================== LEASE SCHEMAS ====================

class LeasePaymentDueRequest(BaseModel):
    lease: LeaseRecord
    as_of: Optional[date] = Field(None, description="Defaults to today")


class LeasePaymentDueResponse(BaseModel):
    due: bool
    frequency: str


class UpcomingPaymentsRequest(BaseModel):
    leases: List[LeaseRecord]
    as_of: Optional[date] = Field(None, description="Defaults to today")
    within_days: int = Field(default=30, ge=1, le=366, description="Look-ahead window in days")


class LeasePaymentResponse(BaseModel):
    property_name: Optional[str] = None
    farmer_name: Optional[str] = None
    amount: float
    due_date: date
    frequency: str
    is_overdue: bool
    is_upcoming: bool


class UpcomingPaymentsResponse(BaseModel):
    items: List[LeasePaymentResponse]
    total: int

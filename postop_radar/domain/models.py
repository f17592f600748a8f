"""
Domain models for post-operative patient monitoring.

These models represent the stored patient record and everything derived from
it. Field names are snake_case in Python; the camelCase names used by the
stored JSON records are accepted as aliases so a saved patient round-trips
through `Patient.model_validate_json` unchanged.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AlertStatus(str, Enum):
    """Traffic-light severity, ordered green < yellow < red."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]


_STATUS_RANK = {AlertStatus.GREEN: 0, AlertStatus.YELLOW: 1, AlertStatus.RED: 2}


class TrendDirection(str, Enum):
    """Direction of a metric between its first and latest reading."""

    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


def _assume_utc(value: datetime) -> datetime:
    """Read timestamps stored without an offset as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# Stored records mix "2026-01-20T08:00:00" and "2026-01-20T08:00:00Z"; both must compare.
UtcDatetime = Annotated[datetime, AfterValidator(_assume_utc)]


class _RecordModel(BaseModel):
    """Base for models stored with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VitalSigns(_RecordModel):
    """One bedside vitals entry."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    heart_rate: float = Field(description="Heart rate in bpm")
    systolic_bp: float = Field(alias="systolicBP", description="Systolic pressure in mmHg")
    diastolic_bp: float = Field(alias="diastolicBP", description="Diastolic pressure in mmHg")
    temperature: float = Field(description="Core temperature in °C")
    urine_output: float | None = Field(default=None, description="Urine output in ml/hr")
    timestamp: UtcDatetime


class LabValues(_RecordModel):
    """One laboratory panel."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    wbc: float = Field(description="White blood cell count, x10⁹/L")
    hemoglobin: float = Field(description="Hemoglobin, g/dL")
    creatinine: float = Field(description="Serum creatinine, mg/dL")
    lactate: float | None = Field(default=None, description="Lactate, mmol/L")
    timestamp: UtcDatetime


class Patient(_RecordModel):
    """
    Stored patient record.

    `vitals` and `labs` must be kept ascending by timestamp by whoever owns the
    record; the engine reads index 0 as earliest and the last entry as latest.
    """

    id: str
    user_id: str
    name: str
    procedure_type: str
    post_op_day: int = Field(ge=0, description="Days since the index operation")
    alert_status: AlertStatus = AlertStatus.GREEN

    id_statement: str | None = None
    pre_op_diagnosis: str | None = None
    post_op_diagnosis: str | None = None
    specimens_taken: str | None = None
    estimated_blood_loss: str | None = None
    complications: str | None = None
    operation_date_time: UtcDatetime | None = None
    surgeon: str | None = None
    anesthesiologist: str | None = None
    anesthesia_type: str | None = None
    clinical_status: str | None = None
    hospital_location: str | None = None

    status_mode: Literal["auto", "manual"] = "auto"
    manual_status: AlertStatus | None = None

    vitals: list[VitalSigns] = Field(default_factory=list)
    labs: list[LabValues] = Field(default_factory=list)
    notes: str | None = None
    created_at: UtcDatetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: UtcDatetime = Field(default_factory=lambda: datetime.now(UTC))


class TrendData(_RecordModel):
    """Trend of one tracked metric across the patient's history."""

    model_config = ConfigDict(frozen=True)

    label: str
    values: list[float]
    timestamps: list[datetime]
    trend: TrendDirection
    concerning: bool

    @property
    def first(self) -> float:
        return self.values[0]

    @property
    def latest(self) -> float:
        return self.values[-1]


class Alert(_RecordModel):
    """An explainable finding produced by one alert rule."""

    model_config = ConfigDict(frozen=True)

    id: str
    patient_id: str
    severity: AlertStatus
    title: str
    description: str
    triggered_by: list[str] = Field(description="Readings that triggered the rule")
    considerations: list[str] = Field(description="Differential diagnoses to consider")
    cognitive_prompts: list[str] = Field(description="Recommended actions")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ReferenceRange(BaseModel):
    """Inclusive normal range for one measurement."""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    unit: str

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


class AbnormalValue(BaseModel):
    """A latest reading that falls outside its reference range."""

    field: str
    value: float
    range: ReferenceRange
    label: str


class AutoStatusResult(BaseModel):
    """Status derived from counting out-of-range latest readings."""

    status: AlertStatus
    abnormal_count: int = Field(ge=0)
    abnormalities: list[AbnormalValue]
    summary: str
    most_recent_abnormal_timestamp: datetime | None = None


class PatientAssessment(BaseModel):
    """Everything one evaluation of a patient produces."""

    patient_id: str
    trends: list[TrendData]
    alerts: list[Alert]
    alert_status: AlertStatus
    auto_status: AutoStatusResult
    effective_status: AlertStatus
    evaluated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

"""Shared builders for patient records."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from postop_radar.domain.models import LabValues, Patient, VitalSigns

BASE_TIME = datetime(2026, 1, 20, 8, 0, tzinfo=UTC)

NORMAL_VITALS: dict[str, Any] = {
    "heart_rate": 80.0,
    "systolic_bp": 120.0,
    "diastolic_bp": 75.0,
    "temperature": 36.8,
    "urine_output": 60.0,
}

NORMAL_LABS: dict[str, Any] = {
    "wbc": 8.0,
    "hemoglobin": 13.0,
    "creatinine": 0.9,
    "lactate": 1.0,
}


def vitals_series(**series: Sequence[float | None]) -> list[VitalSigns]:
    """Vitals entries 6h apart; unspecified fields keep normal values."""
    length = max(len(values) for values in series.values())
    return [
        VitalSigns(
            **{
                **NORMAL_VITALS,
                **{name: values[i] for name, values in series.items()},
                "timestamp": BASE_TIME + timedelta(hours=6 * i),
            }
        )
        for i in range(length)
    ]


def labs_series(**series: Sequence[float | None]) -> list[LabValues]:
    """Lab panels 12h apart; unspecified fields keep normal values."""
    length = max(len(values) for values in series.values())
    return [
        LabValues(
            **{
                **NORMAL_LABS,
                **{name: values[i] for name, values in series.items()},
                "timestamp": BASE_TIME + timedelta(hours=12 * i),
            }
        )
        for i in range(length)
    ]


def build_patient(
    *,
    vitals: list[VitalSigns] | None = None,
    labs: list[LabValues] | None = None,
    post_op_day: int = 1,
    **overrides: Any,
) -> Patient:
    return Patient(
        id=overrides.pop("id", "p1"),
        user_id=overrides.pop("user_id", "u1"),
        name=overrides.pop("name", "Test Patient"),
        procedure_type=overrides.pop("procedure_type", "Right hemicolectomy"),
        post_op_day=post_op_day,
        vitals=vitals if vitals is not None else vitals_series(heart_rate=[80, 80]),
        labs=labs if labs is not None else labs_series(wbc=[8, 8]),
        **overrides,
    )


@pytest.fixture
def make_patient() -> Callable[..., Patient]:
    return build_patient


@pytest.fixture
def stable_patient() -> Patient:
    """Two unremarkable readings of everything."""
    return build_patient(
        vitals=vitals_series(heart_rate=[80, 82]),
        labs=labs_series(wbc=[8, 8.2]),
    )


@pytest.fixture
def make_vitals() -> Callable[..., list[VitalSigns]]:
    return vitals_series


@pytest.fixture
def make_labs() -> Callable[..., list[LabValues]]:
    return labs_series

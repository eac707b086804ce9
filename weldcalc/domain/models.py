"""
Domain models for the welding consumables calculator.

`PipeRecord` mirrors one row of the pipe table and keeps every value as the
text it was read from; numeric interpretation happens in the engine. The
history models are what gets persisted, so their JSON shape is the storage
format.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

DuplicateKey = Tuple[Optional[str], str, str, Decimal]


class WeightRole(str, Enum):
    FILLER = "filler"
    ELECTRODE = "electrode"


class WeightItem(str, Enum):
    """The four per-joint weight line items, in report order."""

    FILLER_2_4 = "filler_2_4"
    ELECTRODE_2_5 = "electrode_2_5"
    ELECTRODE_3_25 = "electrode_3_25"
    ELECTRODE_4_0 = "electrode_4_0"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def role(self) -> WeightRole:
        return WeightRole.FILLER if self is WeightItem.FILLER_2_4 else WeightRole.ELECTRODE


_LABELS: Dict[WeightItem, str] = {
    WeightItem.FILLER_2_4: "Filler Ф2#4",
    WeightItem.ELECTRODE_2_5: "Elec# Ф2#5",
    WeightItem.ELECTRODE_3_25: "Elec# Ф3#25",
    WeightItem.ELECTRODE_4_0: "Elec# Ф4",
}

ELECTRODE_ITEMS: Tuple[WeightItem, ...] = tuple(
    item for item in WeightItem if item.role is WeightRole.ELECTRODE
)


class PipeRecord(BaseModel):
    """
    One row of the pipe reference table.

    A missing joint type means the row applies to every joint type.
    """

    joint_type: Optional[str] = Field(None, description="Joint classification, None = any.")
    nominal_size: str = Field(..., description="Nominal pipe size as written in the table.")
    thickness: str = Field(..., description="Wall thickness as written in the table.")
    filler_2_4: str = Field("0", description="Filler rod kg/joint.")
    electrode_2_5: str = Field("0", description="Electrode Ф2.5 kg/joint.")
    electrode_3_25: str = Field("0", description="Electrode Ф3.25 kg/joint.")
    electrode_4_0: str = Field("0", description="Electrode Ф4 kg/joint.")

    model_config = {"frozen": True}

    @field_validator("joint_type")
    @classmethod
    def blank_joint_type_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v

    def unit_weight_text(self, item: WeightItem) -> str:
        return getattr(self, item.value)


class GradeInfo(BaseModel):
    """Electrode and filler product codes for a material grade."""

    electrode: str
    filler: str

    model_config = {"frozen": True}


class CalculationResult(BaseModel):
    """
    Weights for one submission plus the material codes of its grade.

    All four line items are kept, zeros included; only the display filters
    them out.
    """

    weights: Dict[WeightItem, Decimal] = Field(default_factory=dict)
    electrode: Optional[str] = None
    filler: Optional[str] = None

    model_config = {"frozen": True}

    def weight(self, item: WeightItem) -> Decimal:
        return self.weights.get(item, Decimal(0))

    def displayed_weights(self) -> List[Tuple[WeightItem, Decimal]]:
        return [(item, self.weight(item)) for item in WeightItem if self.weight(item) > 0]

    @property
    def filler_weight(self) -> Decimal:
        return self.weight(WeightItem.FILLER_2_4)

    @property
    def electrode_weight(self) -> Decimal:
        return sum((self.weight(item) for item in ELECTRODE_ITEMS), Decimal(0))

    @property
    def has_material(self) -> bool:
        return bool(self.electrode) and bool(self.filler)


class HistoryEntry(BaseModel):
    """A persisted calculation."""

    timestamp: str
    grade: Optional[str] = None
    joint_type: Optional[str] = None
    nominal_size: str
    thickness: str
    quantity: Decimal = Field(..., gt=0)
    unit_weights: Dict[WeightItem, Decimal] = Field(default_factory=dict)
    result: CalculationResult

    model_config = {"frozen": True}

    def duplicate_key(self) -> DuplicateKey:
        # Grade is not part of the key.
        return (self.joint_type, self.nominal_size, self.thickness, self.quantity)


@dataclass
class AggregatedEntry:
    """Running totals for one (electrode, filler) pair."""

    electrode: str
    filler: str
    total_joints: Decimal = field(default=Decimal(0))
    total_filler: Decimal = field(default=Decimal(0))
    total_electrode: Decimal = field(default=Decimal(0))

    @property
    def key(self) -> Tuple[str, str]:
        return (self.electrode, self.filler)


__all__ = [
    "AggregatedEntry",
    "CalculationResult",
    "DuplicateKey",
    "ELECTRODE_ITEMS",
    "GradeInfo",
    "HistoryEntry",
    "PipeRecord",
    "WeightItem",
    "WeightRole",
]

from enum import Enum
from typing import Any, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ProcedureKind(str, Enum):
    CONSULTATION = "consultation"
    ROOT_CANAL_TREATMENT = "root-canal-treatment"
    RETREATMENT = "retreatment"
    SURGERY = "surgery"


# Short keys sent by older versions of the form
LEGACY_PROCEDURE_KEYS = {"rct": ProcedureKind.ROOT_CANAL_TREATMENT}


class CaseRecord(BaseModel):
    """One referral letter being edited. Edits go through with_field() and yield a new record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    referring_doctor: str = Field(
        "",
        validation_alias=AliasChoices("referringDoctor", "refDr", "referring_doctor"),
        serialization_alias="referringDoctor",
    )
    patient_name: str = Field("", alias="patientName")
    patient_dob: str = Field("", alias="patientDOB")
    tooth: str = ""
    diagnosis: str = "Pulpite irréversible"
    prognosis: str = "Bon"
    plan: str = "Traitement endodontique"
    procedure_type: ProcedureKind = Field(ProcedureKind.ROOT_CANAL_TREATMENT, alias="procedureType")
    clinical_notes: str = Field(
        "",
        validation_alias=AliasChoices("clinicalNotes", "notes", "clinical_notes"),
        serialization_alias="clinicalNotes",
    )

    @field_validator("procedure_type", mode="before")
    @classmethod
    def resolve_legacy_key(cls, value: Any) -> Any:
        if isinstance(value, str):
            return LEGACY_PROCEDURE_KEYS.get(value, value)
        return value

    def with_field(self, name: str, value: Any) -> "CaseRecord":
        if name not in type(self).model_fields:
            raise KeyError(f"CaseRecord has no field '{name}'")
        data = self.model_dump()
        data[name] = value
        return type(self).model_validate(data)


class RewriteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    notes: str = ""
    patient_name: str = Field("", alias="patientName")


class RewriteResponse(BaseModel):
    output: str


class ErrorResponse(BaseModel):
    error: str


class RenderResponse(BaseModel):
    body: str
    letter: str
    content: str
    closing: str


class ProcedureOption(BaseModel):
    key: ProcedureKind
    label: str


class ProcedureCatalogue(BaseModel):
    default: ProcedureKind
    procedures: List[ProcedureOption]

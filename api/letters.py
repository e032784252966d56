"""
Letter templates for the referral report.

Each procedure kind owns one template. Field values are interpolated as-is:
no escaping and no validation, so an empty field leaves an empty slot in the
sentence. The output is plain text and must be displayed as text.
"""
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from config import DEFAULT_PRACTITIONER
from models import CaseRecord, ProcedureKind

BLANK = "________"


class UnknownProcedureKind(LookupError):
    """A record names a procedure kind with no registered template."""


@dataclass(frozen=True)
class Procedure:
    label: str
    template: Callable[[CaseRecord], str]


# ─── Templates ─────────────────────────────────────────────────────────────────

def _opening(record: CaseRecord, spacer: str = "") -> str:
    return f"Je vous remercie de m'avoir référé {record.patient_name}.\n{spacer}\n"


def _consultation(record: CaseRecord) -> str:
    # Spacer line is four spaces, not empty.
    return _opening(record, spacer="    ") + (
        f"J'ai eu le plaisir de voir votre patient(e) pour une consultation concernant la dent {record.tooth}.\n"
        f"L'examen clinique et radiologique confirme un diagnostic de {record.diagnosis.lower()}.\n"
        f"Le pronostic est {record.prognosis.lower()}.\n"
        f"\n"
        f"Je recommande : {record.plan}."
    )


def _root_canal_treatment(record: CaseRecord) -> str:
    return _opening(record) + (
        f"J'ai complété le traitement endodontique de la dent {record.tooth}.\n"
        "Le traitement a été effectué sous digue dentaire et microscope opératoire.\n"
        "Les canaux ont été instrumentés, désinfectés et obturés tridimensionnellement.\n"
        "La chambre pulpaire a été scellée avec un matériau provisoire."
    )


def _retreatment(record: CaseRecord) -> str:
    return _opening(record) + (
        f"J'ai complété le retraitement endodontique de la dent {record.tooth}.\n"
        "L'ancienne obturation a été retirée, la perméabilité rétablie, "
        "et une désinfection rigoureuse effectuée avant l'obturation finale."
    )


def _surgery(record: CaseRecord) -> str:
    return _opening(record) + (
        f"Une microchirurgie endodontique a été réalisée sur la dent {record.tooth}.\n"
        "L'apex a été réséqué et une obturation rétrograde (Biocéramique) a été placée.\n"
        "Les sutures devront être retirées dans 3 à 5 jours."
    )


# Registry order is the order of the form's dropdown.
PROCEDURES: Dict[ProcedureKind, Procedure] = {
    ProcedureKind.CONSULTATION: Procedure("Consultation", _consultation),
    ProcedureKind.ROOT_CANAL_TREATMENT: Procedure("Traitement de Canal (RCT)", _root_canal_treatment),
    ProcedureKind.RETREATMENT: Procedure("Retraitement", _retreatment),
    ProcedureKind.SURGERY: Procedure("Microchirurgie (Apico)", _surgery),
}


# ─── Rendering ─────────────────────────────────────────────────────────────────

def procedure_choices() -> List[Dict[str, str]]:
    return [{"key": kind.value, "label": proc.label} for kind, proc in PROCEDURES.items()]


def render(record: CaseRecord) -> str:
    """Render the procedure-specific body of the letter."""
    procedure = PROCEDURES.get(record.procedure_type)
    if procedure is None:
        raise UnknownProcedureKind(f"No letter template registered for {record.procedure_type!r}")
    return procedure.template(record)


def render_letter_parts(record: CaseRecord, issued_on: Optional[date] = None,
                        practitioner: Optional[str] = None) -> Tuple[str, str]:
    """
    Render the letter as (content, closing). The X-ray images go between the
    two when the letter is laid out for print.
    """
    issued_on = issued_on or date.today()
    practitioner = practitioner or DEFAULT_PRACTITIONER

    concerning = f"Concerne : {record.patient_name}"
    if record.patient_dob:
        concerning += f" (Né(e) le : {record.patient_dob})"

    parts = [
        f"CLINIQUE ENDODONTIQUE\n{practitioner}\nEndodontiste Certifié",
        f"Date : {issued_on.isoformat()}\nDossier : {record.patient_name or BLANK}",
        f"À l'attention du Dr {record.referring_doctor or BLANK}\n{concerning}",
        render(record),
    ]
    if record.clinical_notes:
        parts.append(f"Notes Cliniques :\n{record.clinical_notes}")
    parts.append("Le patient a été avisé de retourner à votre cabinet pour la restauration finale.")

    closing = (
        "Si vous avez des questions concernant ce cas, n'hésitez pas à me contacter.\n\n"
        f"Cordialement,\n\n{practitioner}"
    )
    return "\n\n".join(parts), closing


def render_letter(record: CaseRecord, issued_on: Optional[date] = None,
                  practitioner: Optional[str] = None) -> str:
    """
    Render the complete letter: letterhead, addressee, body, clinical notes
    and closing. Dates use the Canadian French format (YYYY-MM-DD).
    """
    return "\n\n".join(render_letter_parts(record, issued_on, practitioner))

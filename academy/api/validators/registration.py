# academy/api/validators/registration.py
"""
Declarative field rules for a registration draft.

Each field has one fixed rule, and every rule is checked on its own, so the
workflow can validate a single step, a single field, or the whole draft with
the same table. The server enforces the same constraints through
RegistrationCreate; these rules let the client report them before any
network call.
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Mapping, Optional, Tuple

from academy.api.schemas.registration import ProofType, is_valid_email

ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True)
class FieldRule:
    required: bool = False
    max_length: Optional[int] = None
    choices: Optional[Tuple[str, ...]] = None
    email: bool = False
    iso_date: bool = False


FIELD_RULES: Dict[str, FieldRule] = {
    "student_name": FieldRule(required=True, max_length=100),
    "dob": FieldRule(iso_date=True),
    "father_email": FieldRule(email=True),
    "mother_email": FieldRule(email=True),
    "enrollment_date": FieldRule(iso_date=True),
    "student_signature": FieldRule(required=True),
    "proof_type": FieldRule(choices=tuple(p.value for p in ProofType)),
}


def is_iso_date(value: str) -> bool:
    """YYYY-MM-DD naming a real calendar day."""
    if not ISO_DATE.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def check_field(name: str, value: Optional[str]) -> Optional[str]:
    """Return the error message for one field, or None when it passes."""
    rule = FIELD_RULES.get(name)
    if rule is None:
        return None

    text = "" if value is None else str(value)
    if not text.strip():
        if rule.required:
            return "Required"
        # Only "" is stored as null; whitespace still has to match the format
        if not text:
            return None
    if rule.max_length is not None and len(text) > rule.max_length:
        return f"Must be at most {rule.max_length} characters"
    if rule.choices is not None and text not in rule.choices:
        return f"Must be one of: {', '.join(rule.choices)}"
    if rule.email and not is_valid_email(text):
        return "Invalid email"
    if rule.iso_date and not is_iso_date(text):
        return "Use the YYYY-MM-DD format"
    return None


def validate_fields(values: Mapping[str, Optional[str]], fields: Iterable[str]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for name in fields:
        message = check_field(name, values.get(name))
        if message:
            errors[name] = message
    return errors

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, constr, field_validator, model_validator
from pydantic.alias_generators import to_camel


class RegistrationType(str, Enum):
    STUDENT = "student"
    MEMBER = "member"


class ProofType(str, Enum):
    AADHAAR_CARD = "Aadhaar Card"
    PAN_CARD = "PAN Card"
    DRIVING_LICENCE = "Driving Licence"
    SCHOOL_ID_CARD = "School ID Card"
    PASSPORT = "Passport"
    VOTER_ID = "Voter ID"


# Select options offered by the form; stored as free text
SEX_CHOICES = ("Male", "Female", "Other")
TSHIRT_SIZES = ("XS", "S", "M", "L", "XL", "XXL")
SQUAD_LEVELS = ("Beginner", "Intermediate", "Advanced", "Elite")

GUARDIAN_FIELDS = (
    "father_name",
    "father_contact",
    "father_email",
    "mother_name",
    "mother_contact",
    "mother_email",
)


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def check_email(value: Optional[str]) -> Optional[str]:
    # Validated, but stored exactly as typed
    if value is not None and not is_valid_email(value):
        raise ValueError("Invalid email")
    return value


Email = Annotated[Optional[str], AfterValidator(check_email)]


class RegistrationBase(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    type: RegistrationType
    student_name: constr(min_length=1, max_length=100)
    dob: Optional[date] = None
    age: Optional[str] = None
    sex: Optional[str] = None
    nationality: Optional[str] = None
    school_name: Optional[str] = None
    siblings_name: Optional[str] = None
    reg_no: Optional[str] = None
    occupation: Optional[str] = None
    area: Optional[str] = None
    # Parents, only meaningful for students
    father_name: Optional[str] = None
    father_contact: Optional[str] = None
    father_email: Optional[str] = None
    mother_name: Optional[str] = None
    mother_contact: Optional[str] = None
    mother_email: Optional[str] = None
    # Office use
    tshirt_size: Optional[str] = None
    sessions_per_month: Optional[str] = None
    enrollment_date: Optional[date] = None
    fees_per_month: Optional[str] = None
    squad_level: Optional[str] = None
    # Declaration
    student_signature: Optional[str] = None
    declaration_date: Optional[date] = None
    proof_type: Optional[ProofType] = None
    # Files
    photo_url: Optional[str] = None
    proof_url: Optional[str] = None


class RegistrationCreate(RegistrationBase):
    """Payload accepted by POST /api/register. id and createdAt are ignored."""

    father_email: Email = None
    mother_email: Email = None

    @model_validator(mode="before")
    @classmethod
    def blank_to_none(cls, data: Any) -> Any:
        # "never answered" and "explicitly blank" are stored the same way
        if isinstance(data, dict):
            return {key: (None if value == "" else value) for key, value in data.items()}
        return data

    @field_validator("student_name")
    @classmethod
    def student_name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Required")
        return value


# Used in responses to the client
class Registration(RegistrationBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        from_attributes=True,
    )

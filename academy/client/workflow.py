"""
Multi-step enrollment workflow.

The workflow owns a draft registration while the user moves through the
Details, Parents, Office and Declaration steps. Members never see the
Parents step. Nothing is sent to the server until submit(), which uploads
the attached photo and proof one after the other and then posts the
consolidated record. A failed upload or insert leaves the workflow on the
Declaration step with the draft intact so the user can simply retry.
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, Optional, Tuple, Union
from uuid import uuid4

from loguru import logger
from pydantic.alias_generators import to_camel

from academy.api.schemas.registration import GUARDIAN_FIELDS, RegistrationType
from academy.api.validators.registration import validate_fields
from academy.client.api import AcademyClientError


class Step(IntEnum):
    DETAILS = 0
    PARENTS = 1
    OFFICE = 2
    DECLARATION = 3


class Phase(Enum):
    SELECTING_TYPE = "selecting_type"
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class Direction(IntEnum):
    BACKWARD = -1
    FORWARD = 1


STEP_FIELDS: Dict[Step, Tuple[str, ...]] = {
    Step.DETAILS: (
        "student_name",
        "dob",
        "age",
        "sex",
        "nationality",
        "school_name",
        "siblings_name",
        "reg_no",
        "occupation",
        "area",
    ),
    Step.PARENTS: GUARDIAN_FIELDS,
    Step.OFFICE: (
        "tshirt_size",
        "sessions_per_month",
        "enrollment_date",
        "fees_per_month",
        "squad_level",
    ),
    Step.DECLARATION: (
        "student_signature",
        "declaration_date",
        "proof_type",
    ),
}

DRAFT_FIELDS = frozenset(name for fields in STEP_FIELDS.values() for name in fields)
READ_ONLY_FIELDS = frozenset({"declaration_date"})


class WorkflowError(Exception):
    """An action was attempted from a state that does not allow it."""


@dataclass
class Attachment:
    filename: str
    data: bytes
    content_type: Optional[str] = None


def visible_steps(registration_type: Union[RegistrationType, str]) -> Tuple[Step, ...]:
    if RegistrationType(registration_type) is RegistrationType.MEMBER:
        return (Step.DETAILS, Step.OFFICE, Step.DECLARATION)
    return tuple(Step)


def next_visible_step(
    current_step: Step,
    registration_type: Union[RegistrationType, str],
    direction: Direction,
) -> Optional[Step]:
    """
    Returns the step reached from current_step in the given direction, or
    None when there is no step left that way.
    """
    steps = visible_steps(registration_type)
    if current_step not in steps:
        raise ValueError(f"{Step(current_step).name} is not part of the {RegistrationType(registration_type).value} flow")
    index = steps.index(current_step) + int(direction)
    if 0 <= index < len(steps):
        return steps[index]
    return None


class RegistrationWorkflow:

    def __init__(self, today: Callable[[], date] = date.today):
        self._today = today
        self._start()

    def _start(self) -> None:
        self.draft_id = uuid4().hex
        self.phase = Phase.SELECTING_TYPE
        self.registration_type: Optional[RegistrationType] = None
        self.step: Optional[Step] = None
        today = self._today().isoformat()
        self.draft: Dict[str, Any] = {"enrollment_date": today, "declaration_date": today}
        self.errors: Dict[str, str] = {}
        self.notice: Optional[str] = None
        self.photo: Optional[Attachment] = None
        self.proof: Optional[Attachment] = None
        self.record: Optional[Dict[str, Any]] = None

    def _require_phase(self, *phases: Phase) -> None:
        if self.phase not in phases:
            raise WorkflowError(f"Not allowed while {self.phase.value}")

    # --- type selection and navigation ---

    def select_type(self, registration_type: Union[RegistrationType, str]) -> None:
        self._require_phase(Phase.SELECTING_TYPE)
        self.registration_type = RegistrationType(registration_type)
        self.phase = Phase.EDITING
        self.step = Step.DETAILS

    def next(self) -> bool:
        self._require_phase(Phase.EDITING)
        if self.step == Step.DETAILS:
            errors = self.validate_step(self.step)
            if errors:
                self.errors.update(errors)
                return False
        following = next_visible_step(self.step, self.registration_type, Direction.FORWARD)
        if following is None:
            return False
        self.step = following
        return True

    def back(self) -> bool:
        self._require_phase(Phase.EDITING)
        previous = next_visible_step(self.step, self.registration_type, Direction.BACKWARD)
        if previous is None:
            # Back from the first step reopens type selection; the draft stays
            self.phase = Phase.SELECTING_TYPE
            self.step = None
            return True
        self.step = previous
        return True

    # --- draft editing ---

    def update(self, **values: Any) -> None:
        self._require_phase(Phase.SELECTING_TYPE, Phase.EDITING)
        for name in values:
            if name not in DRAFT_FIELDS:
                raise WorkflowError(f"Unknown field: {name}")
            if name in READ_ONLY_FIELDS:
                raise WorkflowError(f"{name} is read-only")
        for name, value in values.items():
            self.draft[name] = value
            self.errors.pop(name, None)

    def attach_photo(self, filename: str, data: bytes, content_type: Optional[str] = None) -> None:
        self._require_phase(Phase.SELECTING_TYPE, Phase.EDITING)
        self.photo = Attachment(filename, data, content_type)

    def attach_proof(self, filename: str, data: bytes, content_type: Optional[str] = None) -> None:
        self._require_phase(Phase.SELECTING_TYPE, Phase.EDITING)
        self.proof = Attachment(filename, data, content_type)

    def clear_photo(self) -> None:
        self.photo = None

    def clear_proof(self) -> None:
        self.proof = None

    # --- validation and submission ---

    def validate_step(self, step: Step) -> Dict[str, str]:
        """Checks every field of the visible steps up to and including `step`."""
        fields = [
            name
            for visible in visible_steps(self.registration_type)
            if visible <= step
            for name in STEP_FIELDS[visible]
        ]
        return validate_fields(self.draft, fields)

    def build_payload(self, photo_url: Optional[str] = None, proof_url: Optional[str] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.registration_type.value}
        for step in visible_steps(self.registration_type):
            for name in STEP_FIELDS[step]:
                value = self.draft.get(name)
                if value is not None:
                    payload[to_camel(name)] = value
        if photo_url:
            payload["photoUrl"] = photo_url
        if proof_url:
            payload["proofUrl"] = proof_url
        return payload

    async def _upload(self, client, attachment: Optional[Attachment], kind: str) -> Optional[str]:
        if attachment is None:
            return None
        blob = await client.upload_file(
            f"{kind}-{self.draft_id}-{attachment.filename}",
            attachment.data,
            attachment.content_type,
        )
        return blob["url"]

    async def submit(self, client) -> bool:
        """
        Uploads attachments, then posts the record. Returns True once the
        record is stored; False when validation or a network call failed,
        with `errors` or `notice` describing why.
        """
        if self.phase is Phase.SUBMITTING:
            raise WorkflowError("A submission is already in progress")
        self._require_phase(Phase.EDITING)
        if self.step != Step.DECLARATION:
            raise WorkflowError("Submit is only available from the declaration step")

        self.draft["declaration_date"] = self._today().isoformat()
        errors = self.validate_step(Step.DECLARATION)
        if errors:
            self.errors = errors
            return False

        self.errors = {}
        self.notice = None
        self.phase = Phase.SUBMITTING
        try:
            # One at a time: photo first, then proof
            photo_url = await self._upload(client, self.photo, "photo")
            proof_url = await self._upload(client, self.proof, "proof")
            record = await client.register(self.build_payload(photo_url, proof_url))
        except AcademyClientError as e:
            logger.warning("Submission of draft {} failed: {}", self.draft_id, e)
            self.phase = Phase.EDITING
            self.notice = f"Submission failed: {e}"
            return False
        except Exception:
            self.phase = Phase.EDITING
            raise

        self.record = record
        self.phase = Phase.SUBMITTED
        return True

    def reset(self) -> None:
        if self.phase is Phase.SUBMITTING:
            raise WorkflowError("A submission is already in progress")
        self._start()

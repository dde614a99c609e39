"""
Pydantic schemas for student roster records and view filters.
"""

from pydantic import BaseModel, ConfigDict, validator
from pydantic.alias_generators import to_camel
from typing import Optional, Dict, Any, List
from enum import Enum


ALL_OPTION = "ALL"


class ClassName(str, Enum):
    """The twelve grade levels, in order."""
    I = "I"
    II = "II"
    III = "III"
    IV = "IV"
    V = "V"
    VI = "VI"
    VII = "VII"
    VIII = "VIII"
    IX = "IX"
    X = "X"
    XI = "XI"
    XII = "XII"

    @property
    def label(self) -> str:
        return f"Class {self.value}"


class Section(str, Enum):
    """Section labels a class can be split into."""
    MAHA = "MAHA"
    RISHI = "RISHI"
    NONE = "NONE"

    @property
    def label(self) -> str:
        return self.value


def _to_text(v: Any) -> str:
    if v is None:
        return ""
    return str(v)


class StudentRecord(BaseModel):
    """
    A single roster entry.

    Attributes are snake_case in Python; the wire and storage format uses the
    camelCase aliases (``studentId``, ``className`` ...). Extra columns coming
    from the remote sheet are kept as-is. ``class_name`` and ``section`` hold
    the raw cell text; membership in ``ClassName`` / ``Section`` is checked
    when a record is saved.
    """
    id: Optional[str] = None
    student_id: str = ""
    student_name: str = ""
    father_name: str = ""
    class_name: str = ""
    section: str = ""
    roll_no: str = ""
    date_of_birth: str = ""
    phone_number: str = ""
    email_id: str = ""
    photo_url: str = ""
    signature_url: str = ""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    @validator("id", pre=True)
    def coerce_id(cls, v):
        if v is None or v == "":
            return None
        return str(v)

    @validator(
        "student_id", "student_name", "father_name", "roll_no", "date_of_birth",
        "phone_number", "email_id", "photo_url", "signature_url",
        pre=True
    )
    def coerce_text(cls, v):
        # Sheets hand back numbers for numeric-looking cells
        return _to_text(v)

    @validator("class_name", "section", pre=True)
    def normalize_choice(cls, v):
        # Raw cell text, blank and unknown values included
        if isinstance(v, Enum):
            v = v.value
        return _to_text(v).strip().upper()

    def to_payload(self, include_id: bool = True) -> Dict[str, Any]:
        """Serialize to the camelCase dict used by the store and the remote API."""
        data = self.model_dump(by_alias=True, mode="json")
        if not include_id or self.id is None:
            data.pop("id", None)
        return data


class FilterCriteria(BaseModel):
    """Caller-owned view filters. Never persisted."""
    search_term: str = ""
    class_name: str = ALL_OPTION
    section: str = ALL_OPTION

    @validator("class_name", "section", pre=True)
    def normalize_choice(cls, v):
        if v is None:
            return ALL_OPTION
        v = str(v).strip()
        if not v or v.upper() == ALL_OPTION:
            return ALL_OPTION
        return v.upper()

    @validator("search_term", pre=True)
    def normalize_search(cls, v):
        return _to_text(v)


class ChoiceOption(BaseModel):
    value: str
    label: str


def class_options() -> List[ChoiceOption]:
    return [ChoiceOption(value=c.value, label=c.label) for c in ClassName]


def section_options() -> List[ChoiceOption]:
    return [ChoiceOption(value=s.value, label=s.label) for s in Section]


def new_student_template() -> StudentRecord:
    """Blank record used to open the add form."""
    return StudentRecord(class_name=ClassName.I.value, section=Section.MAHA.value)

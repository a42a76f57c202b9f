from typing import Dict, Optional

from sqlmodel import Field, SQLModel

GENDER_LABELS: Dict[str, str] = {"M": "Male", "F": "Female", "X": "Mixt"}

AGE_CATEGORY_CUSTOM = 5
AGE_CATEGORY_LABELS: Dict[int, str] = {
    0: "",
    1: "Children",
    2: "Teenagers",
    3: "Adults",
    4: "Masters",
    AGE_CATEGORY_CUSTOM: "Custom",
}


def _range_label(low: int, high: int, unit: str) -> str:
    """'< 12 years', '> 35 years', '18 years', '18 - 35 years' or ''"""
    if low == 0 and high == 0:
        return ""
    if low == 0:
        return f"< {high} {unit}"
    if high == 0:
        return f"> {low} {unit}"
    if low == high:
        return f"{high} {unit}"
    return f"{low} - {high} {unit}"


class Category(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    gender: str = Field(default="M")  # M, F or X
    is_team: bool = Field(default=False)
    age_category: int = Field(default=0)
    age_min: int = Field(default=0)
    age_max: int = Field(default=0)
    grade_category: int = Field(default=0)
    grade_min: int = Field(default=0)  # dan
    grade_max: int = Field(default=0)
    alias: Optional[str] = None

    def age_label(self) -> str:
        label = AGE_CATEGORY_LABELS.get(self.age_category, "")
        if self.age_category == AGE_CATEGORY_CUSTOM:
            return f"{label} {_range_label(self.age_min, self.age_max, 'years')}".strip()
        return label

    def grade_label(self) -> str:
        if self.grade_category == 0:
            return ""
        return _range_label(self.grade_min, self.grade_max, "Dan")

    def build_name(self) -> str:
        """
        Display name built from the category attributes.

        Empty age/grade parts are kept as empty strings, so the result can
        carry trailing whitespace; callers trim it.
        """
        team_text = "Team" if self.is_team else "Single"
        gender_text = GENDER_LABELS.get(self.gender, "")
        return f"{team_text} {gender_text} {self.age_label()} {self.grade_label()}"

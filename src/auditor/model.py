from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from normalizer.model import Dialect


class Impact(str, Enum):
    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"


class Level(str, Enum):
    A = "A"
    AA = "AA"
    AAA = "AAA"

    @property
    def tag(self) -> str:
        """The conformance tag attached to emitted records, e.g. 'wcag2aa'."""
        return f"wcag2{self.value.lower()}"


class Outcome(str, Enum):
    """Result of one rule applied to one element."""
    VIOLATION = "violation"
    PASS = "pass"
    INCOMPLETE = "incomplete"


class NodeRef(BaseModel):
    """
    A pointer to an element in the canonical tree.
    `target` is the arena id assigned by the DOMBuilder; records coming from the
    heuristic fallback or from external callers may not carry one.
    """
    html: str
    target: Optional[int] = None


class Violation(BaseModel):
    """
    A detected rule failure. This is the record shape downstream formatters rely on;
    serialize with `model_dump(by_alias=True)` to get `helpUrl`.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    impact: Impact
    description: str = ""
    help: str = ""
    help_url: str = Field(default="", alias="helpUrl")
    nodes: List[NodeRef] = Field(min_length=1)
    tags: List[str] = Field(default_factory=list)

    @field_validator("impact", mode="before")
    @classmethod
    def normalize_impact(cls, v):
        """Accepts 'CRITICAL', ' critical ' and friends; unknown values become 'minor'."""
        if isinstance(v, Impact):
            return v
        try:
            return Impact(str(v).strip().lower())
        except ValueError:
            return Impact.MINOR


class Pass(BaseModel):
    """A satisfied (or, in `incomplete`/`inapplicable`, undecided) rule record."""
    id: str
    description: str = ""
    nodes: List[NodeRef] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    violations: List[Violation] = Field(default_factory=list)
    passes: List[Pass] = Field(default_factory=list)
    incomplete: List[Pass] = Field(default_factory=list)
    inapplicable: List[Pass] = Field(default_factory=list)

    def count(self, rule_id: str) -> int:
        """Number of violation records for one rule."""
        return sum(1 for v in self.violations if v.id == rule_id)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class AnalysisOptions(BaseModel):
    level: Level = Level.AA
    format: Dialect = Dialect.HTML

    @field_validator("level", mode="before")
    @classmethod
    def parse_level(cls, v):
        if isinstance(v, Level):
            return v
        v = str(v or "AA").strip().upper()
        return v if v in Level.__members__ else Level.AA

    @field_validator("format", mode="before")
    @classmethod
    def parse_format(cls, v):
        return Dialect.coerce(v)

from pydantic import ConfigDict, Field

from auditor.model import AnalysisOptions


class FixOptions(AnalysisOptions):
    """Options for a remediation run. With `auto_fix` off the code is only re-encoded and formatted."""
    model_config = ConfigDict(populate_by_name=True)

    auto_fix: bool = Field(default=True, alias="autoFix")

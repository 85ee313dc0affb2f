import json
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class AutoChecks(BaseModel):
    has_metric_source: bool = False
    field_valid: bool = False
    has_tier_config: bool = False
    code_unique: bool = False

    def failed(self) -> list[str]:
        return [name for name, passed in self.model_dump().items() if not passed]

    @property
    def all_passed(self) -> bool:
        return not self.failed()


class ManualChecks(BaseModel):
    etl_output_verified: bool = False
    copy_approved: bool = False

    class Config:
        extra = "forbid"

    def failed(self) -> list[str]:
        return [name for name, passed in self.model_dump().items() if not passed]

    @property
    def all_passed(self) -> bool:
        return not self.failed()


class ValidationOut(BaseModel):
    auto_checks: AutoChecks
    manual_checks: ManualChecks
    last_run_at: Optional[datetime] = None
    last_run_by: Optional[str] = None

    @classmethod
    def from_model(cls, record: Any) -> "ValidationOut":
        return cls(
            auto_checks=AutoChecks(**json.loads(record.auto_checks_json or "{}")),
            manual_checks=ManualChecks(**json.loads(record.manual_checks_json or "{}")),
            last_run_at=record.last_run_at,
            last_run_by=record.last_run_by,
        )


class ValidationRunIn(BaseModel):
    manual_checks: ManualChecks = ManualChecks()


class ValidationRunOut(ValidationOut):
    can_promote_to_validated: bool
    can_promote_to_deployed: bool

"""Business hours schemas"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...shared.validators import parse_hhmm


class Period(BaseModel):
    """One opening period of a day, e.g. the morning half of a split shift"""

    model_config = ConfigDict(extra="forbid")

    start: str
    end: str

    @model_validator(mode="after")
    def check_order(self):
        if parse_hhmm(self.start) >= parse_hhmm(self.end):
            raise ValueError("start must be before end")
        return self


class BusinessDay(BaseModel):
    model_config = ConfigDict(extra="forbid")

    weekday: int = Field(ge=0, le=6, description="0 = Monday, 6 = Sunday")
    isOpen: bool = True
    periods: list[Period] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_periods(self):
        if not self.isOpen:
            self.periods = []
            return self
        if not self.periods:
            raise ValueError("at least one period is required for open days")

        ordered = sorted(self.periods, key=lambda p: parse_hhmm(p.start))
        for previous, current in zip(ordered, ordered[1:]):
            if parse_hhmm(current.start) < parse_hhmm(previous.end):
                raise ValueError(f"period {current.start}-{current.end} overlaps {previous.start}-{previous.end}")
        self.periods = ordered
        return self


class BusinessHoursUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    days: list[BusinessDay]

    @field_validator("days")
    @classmethod
    def unique_weekdays(cls, v):
        weekdays = [d.weekday for d in v]
        if len(weekdays) != len(set(weekdays)):
            raise ValueError("Each weekday may appear only once")
        return v


class BusinessHoursResponse(BaseModel):
    days: list[BusinessDay]

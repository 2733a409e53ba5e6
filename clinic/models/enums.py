import enum


class RepeatSchedule(str, enum.Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


class RefillSchedule(str, enum.Enum):
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    AS_NEEDED = "As Needed"


def enum_values(enum_cls):
    """Persist enum values ("As Needed") rather than member names."""
    return [member.value for member in enum_cls]

"""Activity and PIN constants shared across UI, API and core layers."""

PIN_LENGTH: int = 4
FEEDBACK_DELAY_MS: int = 2000

MULTIPLE_CHOICE_OPTION_COUNT: int = 4
TRUE_FALSE_OPTION_COUNT: int = 2
TRUE_LABEL: str = "True"
FALSE_LABEL: str = "False"

MIN_PASSWORD_LENGTH: int = 6

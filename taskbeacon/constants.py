"""Application limits shared by storage, schemas and tests."""

MAX_STEPS_PER_TASK = 100
MAX_TASK_TITLE_LENGTH = 255
MAX_STEP_TITLE_LENGTH = 255
MAX_CATEGORY_NAME_LENGTH = 100
MAX_CATEGORY_COLOR_LENGTH = 7

DEFAULT_CATEGORY_COLOR = "#0078D4"
HEX_COLOR_PATTERN = r"^#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$"

"""
Constants for dynaform.

Patterns, attribute keys and default messages shared across the engine.
Centralizing these makes them easier to maintain and update.
"""

import re

# Patterns that might indicate script or template injection in free text
SUSPICIOUS_PATTERNS = [
    r"<script",
    r"javascript:",
    r"on\w+\s*=",
    r"\{\{.*\}\}",
    r"\$\{.*\}",
    r"eval\s*\(",
    r"__proto__",
]

# Valid accessor path segment (alphanumeric + underscore)
VALID_FIELD_NAME = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# Loose e-mail shape check used by the e-mail validator
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Default validator messages
REQUIRED_MESSAGE = "This field is required."
EMAIL_MESSAGE = "Please enter a valid email address"
SAFE_TEXT_MESSAGE = "Value contains disallowed content"

# Keys used in a field's additional_attributes bag
ATTR_OPTIONS = "options"
ATTR_LINES = "lines"
ATTR_SLIDER = "slider"
ATTR_MIN = "min"
ATTR_MAX = "max"
ATTR_STEP = "step"
ATTR_FILE_UPLOAD = "file_upload"
ATTR_ACCEPTED_FILE_TYPES = "accepted_file_types"
ATTR_MAX_FILE_SIZE = "max_file_size"
ATTR_MULTIPLE_FILES = "multiple"
ATTR_LOV_CONFIGURATION = "lov_configuration"
ATTR_LOV_ITEM_TYPE = "lov_item_type"
ATTR_RENDERER_INSTANCE = "renderer_instance"
ATTR_MULTI_SELECT = "multi_select"
ATTR_DATE_FORMAT = "format"
ATTR_CHECKBOX_TEXT = "text"
ATTR_PATTERN = "pattern"

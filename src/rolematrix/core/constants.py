"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Roles and actions shipped with the default configuration
DEFAULT_ROLES = ("Admin", "Manager", "Operator", "Employee")
DEFAULT_ACTIONS = ("View", "Create", "Edit", "Delete")

# Permission id encoding
PERMISSION_ID_SEPARATOR = "."
PERMISSION_ID_ESCAPE = "\\"

# Visibility keys (module, module:submodule, module:submodule:popup)
VISIBILITY_SEPARATOR = ":"

# Hierarchy depth: module -> submodule -> popup module
MAX_HIERARCHY_DEPTH = 3

# Navigation categories, in sidebar order
CATEGORY_CORE = "Core Modules"
CATEGORY_OPTIONAL = "Optional Modules"
CATEGORY_SYSTEM = "System"
NAVIGATION_CATEGORIES = (CATEGORY_CORE, CATEGORY_OPTIONAL, CATEGORY_SYSTEM)

# String field lengths
MAX_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255
MAX_DEPARTMENT_LENGTH = 100

# Password requirements
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128

# User status labels
STATUS_ACTIVE = "Active"
STATUS_INACTIVE = "Inactive"

# Filter value meaning "no filter"
FILTER_ALL = "all"

"""
Question bank constants - capability names and the role -> capability map.
"""

# Capabilities
CAP_QUESTION_ADD = "question:add"
CAP_QUESTION_EDIT_ALL = "question:editall"
CAP_QUESTION_USE_ALL = "question:useall"
CAP_MANAGE_CATEGORY = "question:managecategory"
CAP_QUIZ_MANAGE = "quiz:manage"

ALL_CAPABILITIES = (
    CAP_QUESTION_ADD,
    CAP_QUESTION_EDIT_ALL,
    CAP_QUESTION_USE_ALL,
    CAP_MANAGE_CATEGORY,
    CAP_QUIZ_MANAGE,
)

# Capabilities granted by each role. Assignments made in a context also
# apply to every descendant context.
ROLE_CAPABILITIES = {
    "MANAGER": set(ALL_CAPABILITIES),
    "EDITING_TEACHER": {
        CAP_QUESTION_ADD,
        CAP_QUESTION_EDIT_ALL,
        CAP_QUESTION_USE_ALL,
        CAP_MANAGE_CATEGORY,
        CAP_QUIZ_MANAGE,
    },
    "TEACHER": {
        CAP_QUESTION_USE_ALL,
    },
    "STUDENT": set(),
}

# Category names / labels
TOP_CATEGORY_NAME = "top"
TOP_CATEGORY_LABEL = "Top for {context}"
DEFAULT_CATEGORY_NAME = "Default for {context}"
DEFAULT_CATEGORY_INFO = "The default category for questions shared in context '{context}'."

# Three non-breaking spaces per depth level
INDENT = "\u00a0\u00a0\u00a0"

# Message keys carried by question bank errors
MSG_CANNOT_DELETE_TOP = "cannotdeletetopcat"
MSG_CANNOT_DELETE_ONLY_CHILD = "cannotdeletecate"
MSG_NO_PERMISSIONS = "nopermissions"
MSG_INVALID_MOVE_TARGET = "invalidmovetarget"
MSG_CONTEXT_MISMATCH = "categorycontextmismatch"

MESSAGES = {
    MSG_CANNOT_DELETE_TOP: "Cannot delete the top category.",
    MSG_CANNOT_DELETE_ONLY_CHILD: (
        "Cannot delete this category as it is the only child of the top "
        "category in this context and it has subcategories."
    ),
    MSG_NO_PERMISSIONS: "Sorry, but you do not currently have permissions to do that ({capability}).",
    MSG_INVALID_MOVE_TARGET: "Questions cannot be moved into the category being deleted or its subcategories.",
    MSG_CONTEXT_MISMATCH: "Parent category belongs to a different context.",
}

CATEGORY_SELECT_LABEL = "Question category"

"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "Waai Classroom Teacher Console"
CHILD_URL_PLACEHOLDER: str = "http://<teacher-ip>:8000/"
DASHBOARD_REFRESH_INTERVAL_MS: int = 1500

NAV_BUTTON_DASHBOARD: str = "Dashboard"
NAV_BUTTON_NEW_ACTIVITY: str = "New Activity"
NAV_BUTTON_ADD_CHILD: str = "Add Child"
NAV_BUTTON_RESULTS: str = "Results"
NAV_BUTTON_LOGOUT: str = "Log Out"

AUTH_LOGIN_TITLE: str = "Teacher Login"
AUTH_REGISTER_TITLE: str = "Create Teacher Account"
AUTH_LOGIN_BUTTON: str = "Log In"
AUTH_REGISTER_BUTTON: str = "Register"
AUTH_SWITCH_TO_REGISTER: str = "No account yet? Register"
AUTH_SWITCH_TO_LOGIN: str = "Already registered? Log in"

PIN_SETUP_PROMPT: str = "Create a 4-digit PIN to protect your dashboard."
PIN_CONFIRM_PROMPT: str = "Enter the same PIN again to confirm."
PIN_ENTRY_PROMPT: str = "Enter your 4-digit PIN."

EDITOR_ADD_MULTIPLE_CHOICE: str = "Add Multiple Choice"
EDITOR_ADD_TRUE_FALSE: str = "Add True/False"
EDITOR_REMOVE_QUESTION: str = "Remove Question"
EDITOR_SAVE_ACTIVITY: str = "Save Activity"
EDITOR_TITLE_PLACEHOLDER: str = "Activity title"
EDITOR_GOALS_PLACEHOLDER: str = "What should the children learn from this activity?"
EDITOR_QUESTION_PLACEHOLDER: str = "Enter question text (supports Markdown)."
EDITOR_STATEMENT_PLACEHOLDER: str = "Enter a true/false statement."

NO_CHILDREN_MESSAGE: str = "No children have been added yet."
NO_ACTIVITIES_MESSAGE: str = "No activities yet. Create one to get started."
ACTIVITY_SAVED_MESSAGE: str = "Your educational activity has been created successfully."

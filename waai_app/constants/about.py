"""Static metadata describing Waai Classroom."""

APP_NAME = "Waai Classroom"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "Waai Classroom connects teachers and young learners. Teachers manage child profiles, "
    "author short quiz activities and review progress from this console, while children "
    "play the activities from a browser on the same network."
)

HELP_TEXT = (
    "1. Register or log in, then set up (or enter) your 4-digit teacher PIN.\n"
    "2. Add children from the dashboard. A child PIN is optional but must be unique "
    "among your children.\n"
    "3. Create an activity: give it a title and learning goals, then add multiple-choice "
    "questions (four options) or true/false statements. Mark exactly one correct answer "
    "for every question. Question text supports Markdown.\n"
    "4. Children open the child page shown on the dashboard, pick their avatar, enter "
    "their PIN if they have one, and start an activity.\n"
    "5. Use Results to review what each child answered."
)

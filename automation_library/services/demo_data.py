"""Demo automations loaded into a fresh store."""

from datetime import datetime, timezone

from automation_library.schemas import Automation, Link, Reaction


def demo_automations() -> list[Automation]:
    """Return new copies of the demo records on every call."""
    return [
        Automation(
            id="1",
            title="Auto Email Organizer",
            description="Automatically organizes emails into folders based on sender and keywords",
            student_name="Alice Johnson",
            submission_date=datetime(2024, 1, 15, tzinfo=timezone.utc),
            tags=["email", "productivity", "automation"],
            images=[],
            links=[
                Link(title="GitHub Repository", url="https://github.com/example/email-organizer"),
            ],
            setup_instructions=(
                "## Setup Instructions\n\n"
                "1. Clone the repository\n"
                "2. Install dependencies: `npm install`\n"
                "3. Configure your email credentials in `.env`\n"
                "4. Run: `npm start`"
            ),
            installation_code="npm install -g email-organizer",
            reactions=[
                Reaction(emoji="👍", count=5),
                Reaction(emoji="❤️", count=3),
            ],
        ),
        Automation(
            id="2",
            title="Assignment Deadline Reminder",
            description="Sends SMS reminders 24 hours before assignment deadlines from Canvas",
            student_name="Bob Smith",
            submission_date=datetime(2024, 1, 20, tzinfo=timezone.utc),
            tags=["canvas", "reminders", "sms", "productivity"],
            images=[],
            links=[
                Link(title="Documentation", url="https://docs.example.com/deadline-reminder"),
            ],
            setup_instructions=(
                "## Setup Instructions\n\n"
                "1. Get your Canvas API token\n"
                "2. Set up Twilio account for SMS\n"
                "3. Configure environment variables\n"
                "4. Run the script daily via cron job"
            ),
            reactions=[
                Reaction(emoji="👍", count=8),
                Reaction(emoji="🔥", count=4),
            ],
        ),
    ]

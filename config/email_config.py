"""
Email service configuration constants.

These are fixed values that don't change per environment.
Environment-specific values (SMTP host, credentials) are loaded from env vars.
"""

# Default values (can be overridden by env vars)
EMAIL_DEFAULTS = {
    "mode": "console",
    "from_name": "RATS Event Reminder",
    "from_email": "noreply@rats.app",
    "smtp_port": 587,
}

# Template strings for event emails
REMINDER_SUBJECT = "Reminder: {title} in {days} day{plural}"
DAY_OF_SUBJECT = "Happy {event_type}!"

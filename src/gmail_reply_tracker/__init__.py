"""Gmail Reply Tracker - log unread replies to a Google Sheet and label their threads."""

__version__ = "0.1.0"

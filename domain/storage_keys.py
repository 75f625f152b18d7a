"""Keys used in local durable storage."""

JOBS_KEY = "jobops-jobs"
CUSTOM_FIELDS_KEY = "jobops-custom-fields"
BACKEND_URL_KEY = "jobops-backend-url"
DAILY_BRIEFING_KEY = "jobops-daily-briefing"
CHAT_HISTORY_KEY = "jobops-chat-history"

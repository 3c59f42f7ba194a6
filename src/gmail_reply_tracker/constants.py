"""Constants for Gmail Reply Tracker."""

from pathlib import Path

# --- Config paths ---
CONFIG_DIR = Path.home() / ".gmail-reply-tracker"
CREDENTIALS_PATH = CONFIG_DIR / "credentials.json"
TOKEN_PATH = CONFIG_DIR / "token.json"
STATE_DB_PATH = CONFIG_DIR / "state.db"
CONFIG_PATH = CONFIG_DIR / "config.json"

# --- Google APIs ---
SCOPES = [
    "https://www.googleapis.com/auth/gmail.modify",
    "https://www.googleapis.com/auth/spreadsheets",
]
BATCH_SIZE = 50  # requests per BatchHttpRequest
LIST_PAGE_MAX = 500  # Gmail threads.list hard limit

# --- Run defaults ---
DEFAULT_SHEET_NAME = "Reply Tracking"
DEFAULT_TIME_RANGE = "1d"
DEFAULT_TIMEZONE = "UTC"
PAGE_SIZE = 100  # threads per search page
MAX_PAGES = 20  # ~2000 threads per rule at most
SNIPPET_LENGTH = 500
REPLY_COUNT_SOFT = 2
REPLY_COUNT_MID = 3
REPLY_COUNT_HARD = 5
FREQUENT_REPLY_THRESHOLD = 3

DEFAULT_RULE_NAME = "Follow-up replies (Re:)"
DEFAULT_RULE_QUERY = "is:unread subject:(Re: OR 返信:) newer_than:{time_range}"
DEFAULT_RULE_PRIORITY = "MEDIUM"
DEFAULT_LABEL_COLOR = "#FFAA00"

# --- Labels ---
BASE_LABEL = "Reply Tracking"
FREQUENT_LABEL = "Frequent Replies"

# --- Dedup state ---
PROCESSED_IDS_KEY = "processedMessageIds"
PROCESSED_IDS_CAP = 5000

# --- Sheet layout ---
HEADERS = [
    "Received",
    "From",
    "To",
    "CC",
    "Subject",
    "Body (excerpt)",
    "Filter Rule",
    "Priority",
    "Reply Type",
    "Reply Count",
    "Keywords",
    "Processed At",
    "MessageID",
    "ThreadID",
]
REPLY_COUNT_COLUMN = "Reply Count"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Highlight colors for the reply-count cell, by severity tier.
COLOR_SOFT = "#FFFFCC"
COLOR_MID = "#FFFF99"
COLOR_HARD = "#FFD700"

# --- Scheduling ---
CRON_COMMENT = "gmail_reply_tracker_run"
SCHEDULE_INTERVAL_MINUTES = 30

# --- Reply classification phrases (checked in this priority order) ---
ACKNOWLEDGMENT_PHRASES = [
    "ありがとうございます",
    "承知",
    "了解",
    "確認しました",
    "助かります",
    "thank you",
    "thanks",
    "understood",
    "acknowledged",
    "sounds good",
]
FOLLOWUP_PHRASES = [
    "質問",
    "疑問",
    "わからない",
    "教えて",
    "詳細お願いします",
    "もう少し",
    "question",
    "could you clarify",
    "more details",
]
URGENT_PHRASES = [
    "急ぎ",
    "至急",
    "緊急",
    "すぐ",
    "本日中",
    "大至急",
    "urgent",
    "asap",
    "immediately",
]

# --- Keyword dictionary (reported in this order) ---
KEYWORDS = [
    # pricing
    "見積", "価格", "料金", "費用",
    # deadlines
    "納期", "スケジュール", "期限", "締切",
    # specs and materials
    "仕様", "要件", "機能", "原稿", "写真", "入稿",
    # contracts and billing
    "契約", "合意", "条件", "請求", "支払い",
    # problems
    "問題", "トラブル", "エラー", "不具合",
    # urgency and corrections
    "緊急", "重要", "至急", "確認", "修正", "差し替え",
    # English equivalents
    "quote", "price", "deadline", "specification", "contract",
    "invoice", "payment", "problem", "error", "urgent", "correction",
]

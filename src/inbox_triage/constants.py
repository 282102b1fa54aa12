"""Constants for Inbox Triage."""

from pathlib import Path

# --- Config paths ---
CONFIG_DIR = Path.home() / ".inbox-triage"
CREDENTIALS_PATH = CONFIG_DIR / "credentials.json"
TOKEN_PATH = CONFIG_DIR / "token.json"

# --- Gmail API ---
SCOPES = ["https://www.googleapis.com/auth/gmail.modify"]
BATCH_SIZE = 50  # messages per BatchHttpRequest
PAGE_SIZE = 500  # messages per list page
MODIFY_BATCH_SIZE = 1000  # messages per batchModify call
METADATA_HEADERS = ["From", "Subject", "Date"]

# --- Actions and categories ---
ACTION_KEEP = "keep"
ACTION_ARCHIVE = "archive"
ACTION_DELETE = "delete"
ACTIONS = (ACTION_KEEP, ACTION_ARCHIVE, ACTION_DELETE)

CATEGORY_PRIMARY = "Primary"
CATEGORY_PROMOTIONAL = "Promotional"
CATEGORY_SOCIAL = "Social Media"
CATEGORY_NEWSLETTER = "Newsletter"
CATEGORY_FORUMS = "Forums"
CATEGORY_RECEIPTS = "Receipts"
CATEGORIES = (
    CATEGORY_PRIMARY,
    CATEGORY_PROMOTIONAL,
    CATEGORY_SOCIAL,
    CATEGORY_NEWSLETTER,
    CATEGORY_FORUMS,
    CATEGORY_RECEIPTS,
)

# --- Label vocabulary ---
LABEL_PROMOTIONS = "promotions"
LABEL_SOCIAL = "social"
LABEL_UPDATES = "updates"
LABEL_FORUMS = "forums"
LABEL_STARRED = "starred"
LABEL_IMPORTANT = "important"

# Gmail system label ids -> normalized tags
GMAIL_LABEL_MAP = {
    "CATEGORY_PROMOTIONS": LABEL_PROMOTIONS,
    "CATEGORY_SOCIAL": LABEL_SOCIAL,
    "CATEGORY_UPDATES": LABEL_UPDATES,
    "CATEGORY_FORUMS": LABEL_FORUMS,
    "STARRED": LABEL_STARRED,
    "IMPORTANT": LABEL_IMPORTANT,
}

# --- Label weights ---
WEIGHT_PROMOTIONS_LABEL = 70
WEIGHT_SOCIAL_LABEL = 60
WEIGHT_UPDATES_LABEL = 50
WEIGHT_FORUMS_LABEL = 45
WEIGHT_IMPORTANT_LABEL = -50

# --- Content weights ---
WEIGHT_PROMO_KEYWORDS_MANY = 50  # two or more hits
WEIGHT_PROMO_KEYWORD_SINGLE = 25
WEIGHT_UNSUBSCRIBE = 35
WEIGHT_SOCIAL_DOMAIN = 55
WEIGHT_SOCIAL_PHRASE = 40
WEIGHT_NEWSLETTER_DOMAIN = 45
WEIGHT_NEWSLETTER_KEYWORD = 30
WEIGHT_AUTOMATED = 20
WEIGHT_IMPORTANT_KEYWORD = -40
WEIGHT_PERSONAL_DOMAIN = -20
PERSONAL_DOMAIN_SCORE_CEILING = 50  # personal bonus only below this score

# --- Age tiers (days older than, weight), highest first ---
AGE_TIERS = ((90, 30), (60, 20), (30, 15), (15, 10))

# --- Decision thresholds ---
SCORE_DELETE = 120
SCORE_ARCHIVE_HIGH = 80
SCORE_ARCHIVE = 50
RECENCY_FLOOR_DAYS = 7

# --- Keyword and domain tables ---
PROMO_KEYWORDS = [
    "sale",
    "discount",
    "% off",
    "deal",
    "offer",
    "promo",
    "free shipping",
    "limited time",
    "shop now",
    "buy now",
    "exclusive offer",
    "save now",
    "clearance",
    "flash sale",
    "black friday",
    "cyber monday",
    "coupon",
    "voucher",
]

UNSUBSCRIBE_PHRASES = ["unsubscribe", "opt out", "manage preferences"]

SOCIAL_DOMAINS = [
    "facebook.com",
    "facebookmail.com",
    "twitter.com",
    "x.com",
    "linkedin.com",
    "instagram.com",
    "tiktok.com",
    "pinterest.com",
    "reddit.com",
    "snapchat.com",
    "youtube.com",
    "quora.com",
]

SOCIAL_PHRASES = [
    "liked your",
    "commented on",
    "shared your",
    "mentioned you",
    "tagged you",
    "sent you a message",
    "friend request",
    "connection request",
    "new follower",
    "started following",
]

NEWSLETTER_DOMAINS = [
    "substack.com",
    "mailchimp",
    "sendgrid",
    "constantcontact",
    "campaignmonitor",
    "aweber",
    "getresponse",
    "convertkit",
    "activecampaign",
    "drip",
    "klaviyo",
    "sendinblue",
]

NEWSLETTER_KEYWORDS = [
    "newsletter",
    "weekly digest",
    "daily digest",
    "roundup",
    "this week in",
    "subscribe",
]

AUTOMATED_MARKERS = [
    "noreply@",
    "no-reply@",
    "donotreply@",
    "automated",
    "notification",
    "alert",
    "reminder",
    "confirmation",
]

IMPORTANT_KEYWORDS = [
    "invoice",
    "receipt",
    "payment",
    "bill",
    "statement",
    "urgent",
    "important",
    "action required",
    "verify",
    "security",
    "password",
    "account",
    "confirm",
]

PERSONAL_DOMAINS = ["@gmail.com", "@yahoo.com", "@hotmail.com", "@outlook.com"]

# --- Reasons ---
REASON_NO_CLEANUP = "No cleanup needed"
REASON_STARRED = "Email is starred"
REASON_TOO_RECENT = "Too recent to delete"
REASON_SEPARATOR = " • "

# --- Selection ---
CONFIDENCE_LEVELS = {"high": 80, "medium": 60, "low": 0}

# --- Display ---
SUBJECT_DISPLAY_LIMIT = 60

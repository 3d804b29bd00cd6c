"""Application constants.

Table names, display labels for the enumerated profile fields, and input
limits shared by the workflows.
"""

# ---------------------------------------------------------------------------
# Supabase tables
# ---------------------------------------------------------------------------
ACCOUNTS_TABLE: str = "user_accounts"
CONTENT_CREATORS_TABLE: str = "content_creators"
PRODUCT_CREATORS_TABLE: str = "product_creators"
CATEGORIES_TABLE: str = "categories"

# ---------------------------------------------------------------------------
# Input rules
# ---------------------------------------------------------------------------
MIN_PASSWORD_LENGTH: int = 6
EMAIL_PATTERN: str = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# ---------------------------------------------------------------------------
# Display labels (key -> label stored alongside the key)
# ---------------------------------------------------------------------------
FOLLOWER_RANGE_LABELS: dict[str, str] = {
    "micro": "1K - 10K (Micro)",
    "mid-tier": "10K - 100K (Mid-tier)",
    "macro": "100K - 1M (Macro)",
    "mega": "1M+ (Mega)",
}

RATE_RANGE_LABELS: dict[str, str] = {
    "budget": "Under $500",
    "mid-range": "$500 - $2,000",
    "premium": "$2,000 - $10,000",
    "enterprise": "$10,000+",
}

BUDGET_RANGE_LABELS: dict[str, str] = {
    "under-1k": "Under $1,000",
    "1k-5k": "$1,000 - $5,000",
    "5k-10k": "$5,000 - $10,000",
    "10k-25k": "$10,000 - $25,000",
    "25k-plus": "$25,000+",
}

PROJECT_TYPE_LABELS: dict[str, str] = {
    "product-launch": "Product Launch",
    "brand-awareness": "Brand Awareness",
    "content-series": "Content Series",
    "review-campaign": "Review Campaign",
    "ongoing-partnership": "Ongoing Partnership",
}

PROFILE_STATUS_LABELS: dict[str, str] = {
    "pending": "Pending Verification",
    "verified": "Verified",
    "suspended": "Suspended",
}

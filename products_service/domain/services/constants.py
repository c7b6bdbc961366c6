# Listing defaults (transport may clamp further)
DEFAULT_PAGE_SIZE = 10

# Canonical ordering for both listing paths: most expensive first
SORT_FIELD = "price"
SORT_DESC = True

# Seeding
SEED_PROGRESS_EVERY = 10_000   # log a progress line every N records
SEED_ID_PREFIX = "seed-"       # synthetic and base records share this prefix

# Category vocabulary for synthetic records
SEED_CATEGORIES = [
    "Electronics",
    "Home",
    "Sports",
    "Outdoors",
    "Health",
    "Beauty",
    "Automotive",
    "Toys",
    "Books",
]

# Price range for synthetic records
SEED_MIN_PRICE = 5.0
SEED_MAX_PRICE = 5000.0
SEED_MAX_STOCK = 1000

"""Global constants for the thisorthat application."""

# Firestore collections
SURVEYS_COLLECTION = "surveys"
RESPONSES_COLLECTION = "participant_responses"
PROFILES_COLLECTION = "profiles"
COMMENTS_COLLECTION = "comments"
REACTIONS_COLLECTION = "reactions"

# Survey kinds and visibility
SURVEY_TYPE_STANDARD = "standard"
SURVEY_TYPE_TOURNAMENT = "tournament"
VISIBILITY_PUBLIC = "public"
VISIBILITY_PRIVATE = "private"
VISIBILITIES = (VISIBILITY_PUBLIC, VISIBILITY_PRIVATE)

SURVEY_CATEGORIES = (
    "fashion",
    "food",
    "entertainment",
    "sports",
    "lifestyle",
    "tech",
    "other",
)

# Feed pseudo-categories
FEED_ALL = "all"
FEED_TRENDING = "trending"
FEED_TOURNAMENT = "tournament"

# Voting
SLOT_A = "A"
SLOT_B = "B"
SLOTS = (SLOT_A, SLOT_B)

STRENGTH_BY_A_HAIR = "by-a-hair"
STRENGTH_COMFORTABLY = "comfortably"
STRENGTH_NO_BRAINER = "no-brainer"
VOTE_STRENGTHS = (STRENGTH_BY_A_HAIR, STRENGTH_COMFORTABLY, STRENGTH_NO_BRAINER)

DEFAULT_ROUND_VOTES_REQUIRED = 5
DEFAULT_MAX_VOTES = 10
MIN_TOURNAMENT_ITEMS = 2

# Engagement
REACTION_TYPES = ("fire", "laugh", "think", "eyes", "hundred")
COMMENT_MAX_LENGTH = 500

# Invite codes
INVITE_CODE_LENGTH = 8
INVITE_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

# Trending score weights
TRENDING_VOTE_WEIGHT = 10
TRENDING_ENGAGEMENT_WEIGHT = 5

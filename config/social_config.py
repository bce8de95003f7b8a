"""
Social media configuration constants.

Instagram OAuth / Graph endpoints and post formatting limits.
Client id, secret and redirect URI are loaded from env vars.
"""

INSTAGRAM_AUTHORIZE_URL = "https://api.instagram.com/oauth/authorize"
INSTAGRAM_TOKEN_URL = "https://api.instagram.com/oauth/access_token"
INSTAGRAM_LONG_LIVED_TOKEN_URL = "https://graph.instagram.com/access_token"

INSTAGRAM_SCOPES = "user_profile,user_media"

# Long-lived tokens are valid for 60 days; refresh a day early
INSTAGRAM_TOKEN_LIFETIME_DAYS = 59

INSTAGRAM_MAX_CAPTION_LENGTH = 2200
INSTAGRAM_HASHTAGS = "\n\n#RATS #SpecialEvent #Celebration"

# Platforms whose connection needs a stored OAuth token
OAUTH_PLATFORMS = ("instagram", "facebook", "twitter")

# Platforms that are always reachable without an OAuth connection
DIRECT_PLATFORMS = ("email", "whatsapp")

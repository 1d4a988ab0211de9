import os

DATABASE_URL = os.getenv("DATABASE_URL", "postgresql+psycopg2://postgres:postgres@db:5432/cats_social")

JWT_SECRET = os.getenv("JWT_SECRET", "")
ACCESS_TOKEN_TTL_HOURS = int(os.getenv("ACCESS_TOKEN_TTL_HOURS", "8"))
BCRYPT_SALT = int(os.getenv("BCRYPT_SALT", "8"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEV_MODE = os.getenv("DEV_MODE", "false").lower() == "true"

CAT_LIST_DEFAULT_LIMIT = int(os.getenv("CAT_LIST_DEFAULT_LIMIT", "5"))
CAT_LIST_MAX_LIMIT = int(os.getenv("CAT_LIST_MAX_LIMIT", "100"))

CAT_RACES = (
    "Persian",
    "Maine Coon",
    "Siamese",
    "Ragdoll",
    "Bengal",
    "Sphynx",
    "British Shorthair",
    "Abyssinian",
    "Scottish Fold",
    "Birman",
)
CAT_SEXES = ("male", "female")
CAT_MAX_AGE_IN_MONTH = 120082

RL_AUTH_REGISTER_LIMIT = int(os.getenv("RL_AUTH_REGISTER_LIMIT", "100"))
RL_AUTH_LOGIN_LIMIT = int(os.getenv("RL_AUTH_LOGIN_LIMIT", "100"))
RL_MATCH_CREATE_LIMIT = int(os.getenv("RL_MATCH_CREATE_LIMIT", "100"))
RL_WINDOW_SECONDS = int(os.getenv("RL_WINDOW_SECONDS", "60"))

PROJECT_NAME = "AFFiNE Cloud"
API_PREFIX = "/api"
AUTH_USER_HEADER = "x-auth-user"

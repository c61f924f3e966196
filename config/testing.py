SECRET_KEY = "test-secret"

SUPABASE_CONFIG = {
    "url": "http://supabase.test",
    "anon_key": "test-anon-key",
    "service_role_key": "test-service-role-key",
}

HTTP_TIMEOUT = 5.0
LOG_LEVEL = "WARNING"
SESSION_DAYS = 1

DEBUG = False
TESTING = True

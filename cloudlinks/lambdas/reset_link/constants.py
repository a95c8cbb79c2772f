# Log events and error codes
RESET_FORBIDDEN = 'RESET_FORBIDDEN'
RESET_SUCCESS = 'RESET_SUCCESS'
RESET_SKIPPED = 'RESET_SKIPPED'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
INVALID_CONFIGURATION = 'INVALID_CONFIGURATION'

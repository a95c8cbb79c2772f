# Log events and error codes
HOME_REDIRECT = 'HOME_REDIRECT'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
LINK_EXHAUSTED = 'LINK_EXHAUSTED'
LINK_VIEW_EXPIRED = 'LINK_VIEW_EXPIRED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
TEXT_RENDERED = 'TEXT_RENDERED'
STORE_UNAVAILABLE = 'STORE_UNAVAILABLE'
INVALID_CONFIGURATION = 'INVALID_CONFIGURATION'

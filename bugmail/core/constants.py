"""
Constants
Channel names, template names and attachment names used across the service.
"""
EMAIL_TYPE = "email"

BUG_TEMPLATE = "mail_bug.txt"
JOB_TEMPLATE = "mail_test_result.txt"

ATTACHMENT_CONFIG = "config.txt"
ATTACHMENT_PATCH = "patch.txt"
ATTACHMENT_LOG = "raw.log"
ATTACHMENT_REPRO_SYZ = "repro.txt"
ATTACHMENT_REPRO_C = "repro.c"

# Address list limits
MAX_EMAIL_LEN = 1000
MAX_EMAILS = 50

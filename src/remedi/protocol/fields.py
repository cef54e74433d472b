"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling. The
field names are part of the REMEDI wire contract and must not change.
"""

PROTOCOL_VERSION = 0

# Common to every message.
PROT_VER = "prot_ver"
MSG_TYPE = "msg_type"

# Status reporting, shared by responses and per-sentence target data.
STAT_CODE = "stat_code"
STAT_MSG = "stat_msg"

# Translation jobs.
JOB_ID = "job_id"
PRIORITY = "priority"
SOURCE_LANG = "source_lang"
TARGET_LANG = "target_lang"
IS_TRANS_INFO = "is_trans_info"
SOURCE_SENT = "source_sent"
TARGET_DATA = "target_data"
TRANS_TEXT = "trans_text"
STACK_LOAD = "stack_load"

# Pre- and post-processor jobs.
JOB_TOKEN = "job_token"
NUM_CHS = "num_chs"
CH_IDX = "ch_idx"
LANG = "lang"
TEXT = "text"

# Supported language queries.
LANGS = "langs"

# A processor job token may carry a chunk-local suffix after this delimiter.
TOKEN_DELIMITER = "."

LANGUAGE_AUTO = "auto"

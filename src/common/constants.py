# src/common/constants.py

MAGIC_COOKIE = 0xabcddcba

# Message types
TYPE_DISCOVERY = 0x2
TYPE_TALLY = 0x3
TYPE_TERMINATE = 0x4

# Deck / hand geometry
DECK_SIZE = 52
HAND_SIZE = 5
RANKS_PER_SUIT = 13
NUM_SUITS = 4
NUM_CATEGORIES = 10

# Rank codes (rank = card % 13)
RANK_ACE = 0
RANK_TEN = 9

# Packet lengths (bytes)
HEADER_LEN = 4 + 1                                 # 5
DISCOVERY_LEN = HEADER_LEN + 2 + 1                 # 8
TALLY_LEN = HEADER_LEN + 2 + 8 * NUM_CATEGORIES    # 87
TERMINATE_LEN = HEADER_LEN                         # 5

MAX_WORKER_ID = 0xFFFF
MAX_COUNT = 0xFFFFFFFFFFFFFFFF

# Suit encoding: suit = card // 13 -> letter
SUIT_LETTERS = ["S", "H", "D", "C"]
SUIT_TO_CODE = {s: i for i, s in enumerate(SUIT_LETTERS)}
RANK_NAMES = ["A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K"]
RANK_TO_CODE = {r: i for i, r in enumerate(RANK_NAMES)}

BACKENDS = {"process", "thread"}

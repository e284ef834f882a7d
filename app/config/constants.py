"""
Application constants.

Centralized constants for the application.
"""

# ========================================================================
# CHAIN CONSTANTS
# ========================================================================

ALCHEMY_MAINNET_URL = "https://eth-mainnet.g.alchemy.com/v2/{api_key}"

DEFAULT_TOKEN_ADDRESS = "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984"  # UNI
DEFAULT_FIREPIT_ADDRESS = "0x0D5Cd355e2aBEB8fb1552F56c965B867346d6721"
DEFAULT_BURN_ADDRESS = "0x000000000000000000000000000000000000dEaD"

# 4,000 UNI in wei
DEFAULT_AMOUNT_THRESHOLD = 4_000 * 10**18

# Firepit was deployed at block 24028203 on December 16, 2025
FIREPIT_DEPLOYMENT_BLOCK = 24_028_203

# Roughly 1 hour at 12s/block
INITIAL_LOOKBACK_BLOCKS = 300

# Alchemy accepts to_block - from_block <= 10,000 on paid plans
MAX_BLOCKS_PER_QUERY = 10_000

# ========================================================================
# BLOCKCHAIN CONSTANTS
# ========================================================================

BLOCKCHAIN_EXECUTOR_TIMEOUT = 20.0  # Timeout for run_in_executor operations
BLOCKCHAIN_RPC_TIMEOUT = 30  # RPC provider HTTP timeout
BLOCKCHAIN_EXECUTOR_WORKERS = 8

# ========================================================================
# TELEGRAM BOT CONSTANTS
# ========================================================================

TELEGRAM_TIMEOUT = 10.0  # Telegram API operations timeout

# ========================================================================
# STATE KEYS
# ========================================================================

LAST_PROCESSED_BLOCK_KEY = "lastProcessedBlock"

import os
from dotenv import load_dotenv

load_dotenv()

RPC_URL = os.environ.get("RPC_URL", "https://api.mainnet-beta.solana.com")
RPC_TIMEOUT = float(os.environ.get("RPC_TIMEOUT", "30"))
BLOCK_FETCH_RETRIES = int(os.environ.get("BLOCK_FETCH_RETRIES", "5"))
BLOCK_FETCH_BACKOFF = float(os.environ.get("BLOCK_FETCH_BACKOFF", "0.5"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
SERVER_HOST = os.environ.get("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.environ.get("SERVER_PORT", "8000"))

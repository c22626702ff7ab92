import re
import time
import uuid

TOKEN_ID_PATTERN = re.compile(r"^NFT_\d+_[0-9a-f]{32}$")

def generate_token_id() -> str:
    """NFT_<epoch ms>_<uuid4 hex>"""
    return f"NFT_{int(time.time() * 1000)}_{uuid.uuid4().hex}"

from models.user import User
from models.nft import NFT, NFTStatus

__all__ = ["User", "NFT", "NFTStatus"]

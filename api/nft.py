from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from typing import Optional

from api.deps import get_marketplace
from core.errors import ValidationError
from core.marketplace import ImagePayload, MarketplaceService
from schemas.nft import MintedNFTResponse, NFTResponse
from schemas.response import dump, error_response, success_response

router = APIRouter(tags=["nft"])

@router.post("/nfts/mint", status_code=status.HTTP_201_CREATED)
def mint_nft(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    creator: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    service: MarketplaceService = Depends(get_marketplace),
):
    """Pin the uploaded image to IPFS and record a new NFT"""
    if image is None or not image.filename:
        raise ValidationError("Image file is required")

    # Read one byte past the limit so oversized uploads are rejected without buffering them whole
    data = image.file.read(service.max_image_size + 1)
    nft = service.mint_nft(
        title, description, price, category, creator,
        image=ImagePayload(data, image.filename, image.content_type),
    )
    return success_response(dump(MintedNFTResponse, nft), "NFT minted successfully")

@router.get("/create-test-nft")
def create_test_nft(service: MarketplaceService = Depends(get_marketplace)):
    """Seed a sample NFT without an image"""
    nft = service.create_test_nft()
    return success_response(dump(NFTResponse, nft), "Test NFT created successfully")

@router.get("/nfts")
def list_nfts(service: MarketplaceService = Depends(get_marketplace)):
    """List all NFTs, newest first"""
    nfts = service.list_nfts()
    return success_response(
        {"nfts": [dump(NFTResponse, n) for n in nfts], "total": len(nfts)},
        "NFTs retrieved successfully",
    )

@router.get("/nfts/available")
def list_available_nfts(service: MarketplaceService = Depends(get_marketplace)):
    """List NFTs that can still be bought"""
    nfts = service.list_available_nfts()
    return success_response(
        {"nfts": [dump(NFTResponse, n) for n in nfts], "total": len(nfts)},
        "Available NFTs retrieved successfully",
    )

@router.get("/nfts/{token_id}")
def get_nft(token_id: str, service: MarketplaceService = Depends(get_marketplace)):
    """Get NFT details; each call counts as a view"""
    nft = service.get_nft(token_id)
    if nft is None:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=error_response("NFT not found"))
    return success_response(dump(NFTResponse, nft), "NFT retrieved successfully")

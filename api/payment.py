from fastapi import APIRouter, Depends

from api.deps import get_marketplace
from core.marketplace import MarketplaceService
from schemas.nft import NFTResponse
from schemas.payment import PaymentApproveRequest, PaymentCompleteRequest
from schemas.response import dump, success_response

router = APIRouter(prefix="/payments", tags=["payment"])

@router.post("/approve")
def approve_payment(body: PaymentApproveRequest, service: MarketplaceService = Depends(get_marketplace)):
    """Confirm the NFT is still for sale (mock approval, no state change)"""
    nft = service.approve_payment(body.payment_id, body.token_id, body.buyer_id)
    return success_response(
        {"paymentId": body.payment_id, "nft": dump(NFTResponse, nft)},
        "Payment approved",
    )

@router.post("/complete")
def complete_payment(body: PaymentCompleteRequest, service: MarketplaceService = Depends(get_marketplace)):
    """Record a completed payment and transfer ownership to the buyer"""
    nft = service.complete_payment(body.payment_id, body.txid, body.token_id, body.buyer_id)
    return success_response(
        {"paymentId": body.payment_id, "txid": body.txid, "nft": dump(NFTResponse, nft)},
        "Payment completed successfully",
    )

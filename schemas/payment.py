from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class PaymentApproveRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    payment_id: str
    token_id: str
    buyer_id: str

class PaymentCompleteRequest(PaymentApproveRequest):
    txid: str

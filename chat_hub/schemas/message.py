from pydantic import BaseModel, ConfigDict, Field

from chat_hub.domain.messages import BroadcastResult


class SendMessageRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    text: str = Field(min_length=1, max_length=4000)


class DeliveryFailureResponse(BaseModel):
    session_id: str
    reason: str

    model_config = ConfigDict(from_attributes=True)


class BroadcastResponse(BaseModel):
    recipients: int
    delivered: int
    failures: list[DeliveryFailureResponse]

    @classmethod
    def from_result(cls, result: BroadcastResult) -> "BroadcastResponse":
        return cls(
            recipients=len(result.recipients),
            delivered=result.delivered_count,
            failures=[
                DeliveryFailureResponse.model_validate(failure)
                for failure in result.failures
            ],
        )


class SessionListResponse(BaseModel):
    hub: str
    sessions: list[str]
    count: int

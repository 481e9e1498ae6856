from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


# Client -> server WebSocket frames. Unknown keys are ignored.
class JoinSession(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["join_session"]
    session_id: str = Field(alias="sessionId", min_length=1)
    user_id: str = Field(alias="userId")


class CellUpdate(BaseModel):
    type: Literal["cell_update"]
    row: int = Field(ge=0)
    col: int = Field(ge=0)
    value: str = Field(max_length=1)

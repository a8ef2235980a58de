from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class LocalRegisterRequest(BaseModel):
    # Presence and format are checked by the eligibility rules, not here
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    pincode: Optional[str] = None

    @field_validator("pincode", mode="before")
    @classmethod
    def pincode_as_text(cls, value):
        # JSON clients may send the pincode as a number
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class LocalRegisterResponse(BaseModel):
    success: bool = True
    referral_code: str


class LocalResult(BaseModel):
    id: int
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    pincode: Optional[str] = None
    referral_code: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VisitorResult(BaseModel):
    id: int
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    referral_code_used: Optional[str] = None
    origin_city: Optional[str] = None
    travel_date: Optional[str] = None
    return_date: Optional[str] = None
    ticket_filename: Optional[str] = None
    verification_status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TicketUploadResponse(BaseModel):
    success: bool = True
    message: str = "Ticket uploaded successfully"


class ValidateCodeRequest(BaseModel):
    code: Optional[str] = None


class ValidateCodeResponse(BaseModel):
    valid: bool


class VerifyActionRequest(BaseModel):
    visitorId: int
    action: str


class VerifyActionResponse(BaseModel):
    success: bool = True
    visitor_msg: str
    status: str
    # Set on approval so the admin UI can message the visitor
    notify_phone: Optional[str] = None


class AdminLoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class CodeLookupResponse(BaseModel):
    code: str
    exact_match: Optional[LocalResult] = None
    case_insensitive_match: Optional[LocalResult] = None
    similar_codes: List[str] = []
    visitors_using_code: List[VisitorResult] = []

"""
Models for deployment domain.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Any

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_CONFLICT = 409
HTTP_INTERNAL_SERVER_ERROR = 500


@dataclass
class WebhookResponse:
    """HTTP rendering of a webhook outcome"""
    status_code: int
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls, message: str, details: Optional[Dict[str, Any]] = None) -> 'WebhookResponse':
        return cls(status_code=HTTP_OK, success=True, message=message, details=details)

    @classmethod
    def failure(cls, status_code: int, error: str, details: Optional[Dict[str, Any]] = None) -> 'WebhookResponse':
        return cls(status_code=status_code, success=False, error=error, details=details)

    def to_dict(self) -> Dict[str, Any]:
        """JSON body (status code excluded)"""
        body: Dict[str, Any] = {'success': self.success}
        if self.message is not None:
            body['message'] = self.message
        if self.error is not None:
            body['error'] = self.error
        if self.details is not None:
            body['details'] = self.details
        return body

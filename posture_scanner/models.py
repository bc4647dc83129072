# posture_scanner/models.py
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .fetch import FetchErrorKind


class Severity(str, Enum):
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"
    ERROR = "error"


class CookieRecord(BaseModel):
    name: str
    secure: bool
    http_only: bool
    same_site: bool


class CookieIssue(BaseModel):
    name: str
    issues: List[str] = Field(default_factory=list)
    raw: str


class CookieFinding(BaseModel):
    check: Literal["cookies"] = "cookies"
    success: bool
    domain: str
    severity: Severity
    status: str
    message: str
    cookie_count: int = 0
    cookies: List[CookieRecord] = Field(default_factory=list)
    issues: List[CookieIssue] = Field(default_factory=list)
    issue_count: int = 0
    error: Optional[str] = None
    error_kind: Optional[FetchErrorKind] = None


class HstsDetail(BaseModel):
    header: Optional[str] = None
    header_present: bool = False
    max_age: Optional[int] = None       # seconds
    max_age_days: Optional[int] = None
    include_subdomains: bool = False
    preload: bool = False
    issues: List[str] = Field(default_factory=list)


class HstsFinding(BaseModel):
    check: Literal["hsts"] = "hsts"
    success: bool
    domain: str
    enabled: bool
    severity: Severity
    status: str
    message: str
    details: HstsDetail = Field(default_factory=HstsDetail)
    error: Optional[str] = None
    error_kind: Optional[FetchErrorKind] = None


AnyFinding = Annotated[Union[CookieFinding, HstsFinding], Field(discriminator="check")]


class ScanRequest(BaseModel):
    target: str
    checks: List[str] = Field(default_factory=list)


class ScanStatus(BaseModel):
    scan_id: str
    status: str


class ScanResult(BaseModel):
    scan_id: str
    target: Optional[str] = None
    findings: List[AnyFinding] = Field(default_factory=list)

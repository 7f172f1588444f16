from enum import Enum


class SubjectKey(str, Enum):
    """3학년 필수 과목 식별자 (순서 고정, 런타임 변경 불가)"""
    CLIENT_TECH = "client_tech"
    NETWORKING = "networking"
    WEB_DESIGN = "web_design"
    SYSTEM_INTEGRATION = "system_integration"
    PROGRAMMING = "programming"


class EvaluationStatus(str, Enum):
    EXCELLENT = "EXCELLENT"
    PASSED = "PASSED"
    FAILED = "FAILED"
    INVALID = "INVALID"   # 분류 규칙 사이의 공백 구간 (2.75, 3.00]


class GradeBand(str, Enum):
    """화면 표시용 평점 구간 (HIGH: 1.00~1.50, MID: 1.75~2.50, LOW: 2.75~3.00)"""
    HIGH = "HIGH"
    MID = "MID"
    LOW = "LOW"
    FAILING = "FAILING"
    UNKNOWN = "UNKNOWN"

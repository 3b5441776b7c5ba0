# 기본 사전 데이터 (manage.py seed-dictionary 및 최초 기동 시 사용)
from typing import Any, Dict, List

from .schemas import MappingCreate

SEED_MAPPINGS: List[Dict[str, Any]] = [
    # 사용자 관련
    {"korean": "사용자", "english": "user", "type": "변수", "category": "사용자", "description": "시스템 사용자",
     "usage": "const user = getUser();", "tags": ["사용자", "user", "유저", "회원"]},
    {"korean": "사용자명", "english": "userName", "type": "변수", "category": "사용자", "description": "사용자 이름",
     "usage": "const userName = user.name;", "tags": ["사용자명", "username", "이름", "name"]},
    {"korean": "사용자정보", "english": "userInfo", "type": "변수", "category": "사용자", "description": "사용자 정보 객체",
     "usage": "const userInfo = getUserInfo();", "tags": ["사용자정보", "userinfo", "회원정보"]},
    {"korean": "회원", "english": "member", "type": "변수", "category": "사용자", "description": "서비스 회원",
     "usage": "const member = getMember();", "tags": ["회원", "member", "멤버"]},
    {"korean": "회원가입", "english": "signUp", "type": "함수", "category": "인증", "description": "회원 가입 기능",
     "usage": "await signUp(userData);", "tags": ["회원가입", "signup", "register", "가입"]},
    {"korean": "로그인", "english": "login", "type": "함수", "category": "인증", "description": "로그인 기능",
     "usage": "await login(credentials);", "tags": ["로그인", "login", "signin", "인증"]},
    {"korean": "로그아웃", "english": "logout", "type": "함수", "category": "인증", "description": "로그아웃 기능",
     "usage": "await logout();", "tags": ["로그아웃", "logout", "signout"]},
    {"korean": "비밀번호", "english": "password", "type": "변수", "category": "인증", "description": "사용자 비밀번호",
     "usage": "const password = form.password;", "tags": ["비밀번호", "password", "pwd", "암호"]},
    # 정보 관련
    {"korean": "이메일", "english": "email", "type": "변수", "category": "정보", "description": "이메일 주소"},
    {"korean": "전화번호", "english": "phoneNumber", "type": "변수", "category": "정보", "description": "전화번호"},
    {"korean": "주소", "english": "address", "type": "변수", "category": "정보", "description": "주소 정보"},
    # 금융
    {"korean": "계좌", "english": "account", "type": "변수", "category": "금융", "description": "금융 계좌"},
    {"korean": "계좌번호", "english": "accountNumber", "type": "변수", "category": "금융", "description": "계좌 번호"},
    {"korean": "거래", "english": "transaction", "type": "변수", "category": "금융", "description": "금융 거래"},
    {"korean": "입금", "english": "deposit", "type": "함수", "category": "금융", "description": "입금 처리"},
    {"korean": "출금", "english": "withdrawal", "type": "함수", "category": "금융", "description": "출금 처리"},
    {"korean": "잔액", "english": "balance", "type": "변수", "category": "금융", "description": "계좌 잔액"},
    # 거래
    {"korean": "주문", "english": "order", "type": "변수", "category": "거래", "description": "주문 정보"},
    {"korean": "체결", "english": "execution", "type": "변수", "category": "거래", "description": "거래 체결"},
    {"korean": "매수", "english": "buy", "type": "함수", "category": "거래", "description": "매수 주문"},
    {"korean": "매도", "english": "sell", "type": "함수", "category": "거래", "description": "매도 주문"},
    # 시간
    {"korean": "날짜", "english": "date", "type": "변수", "category": "시간", "description": "날짜"},
    {"korean": "시작일", "english": "startDate", "type": "변수", "category": "시간", "description": "시작 날짜"},
    {"korean": "종료일", "english": "endDate", "type": "변수", "category": "시간", "description": "종료 날짜"},
]


def seed_items() -> List[MappingCreate]:
    return [MappingCreate(source="seed", **item) for item in SEED_MAPPINGS]


def items_from_json(payload: Any, *, source: str = "import") -> List[MappingCreate]:
    """``{"items": [...]}`` 또는 배열 형식의 JSON을 MappingCreate 목록으로 변환"""
    rows = payload.get("items", []) if isinstance(payload, dict) else payload
    if not isinstance(rows, list):
        raise ValueError("expected 'items' array or a JSON array")
    items = []
    for row in rows:
        if not row.get("korean") or not row.get("english"):
            raise ValueError(f"korean/english missing: {row}")
        items.append(MappingCreate(
            korean=row["korean"],
            english=row["english"],
            type=row.get("type") or "변수",
            category=row.get("category"),
            description=row.get("description"),
            usage=row.get("usage"),
            tags=row.get("tags"),
            source=source,
            confidence=row.get("confidence"),
        ))
    return items

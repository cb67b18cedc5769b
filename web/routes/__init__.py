"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounts: 계정 API (연쇄 삭제, 잔액 정합성 검사 포함)
- entries: 수입/지출/이체 Entry API
"""

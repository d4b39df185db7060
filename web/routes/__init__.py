"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounts: 계좌, 거래내역
- movements: 입출금
- transfers: 계좌 간 이체
- closings: 일일 마감/재개/검증
"""

"""
App layer: intake 서버 (FastAPI).

역할:
- /addItem, /getTime, /health JSON API
- 브라우저 클라이언트 정적 파일 서빙
- ⚠️ 파일 쓰기 로직 없음 (core.log_store에 위임)
"""

# backend/market_api/analysis/services/__init__.py
"""
Analysis 서비스 모듈 패키지

각 모듈별 책임:
- countries.py: 국가 문자열 → 언어권 분류
- model_selector.py: Gemini 모델 자동 감지 및 캐시
- prompt_builder.py: 1차 생성 / 키워드 보정 프롬프트 생성
- gemini_client.py: Gemini REST API 호출
- payload_parser.py: 모델 응답 텍스트에서 JSON 결과 추출
- keyword_normalizer.py: 키워드 이중언어 형식 정규화 및 검증
- fallback_table.py: 고정 키워드 대체표
- error_hints.py: 할당량 오류 메시지의 재시도 대기시간 추출
"""

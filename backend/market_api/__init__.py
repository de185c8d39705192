# backend/market_api/__init__.py
"""Market analysis API: Gemini 프록시 + 키워드 정규화 서비스"""

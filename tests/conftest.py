"""Shared analysis payloads for report tests."""

import copy

import pytest


RAW_RESULT = {
    "summary": {
        "total_requests": 12345,
        "total_errors": 10,
        "success_rate": 90,
        "error_types": {"4xx": 7, "5xx": 3},
    },
    "slowest_apis": [
        {
            "endpoint": "/api/search",
            "method": "GET",
            "avg_latency_ms": 1840.5,
            "p95_latency_ms": 3200.0,
            "requests": 42,
            "error_rate": 7.1,
        },
        {
            "endpoint": "/api/orders",
            "method": "POST",
            "avg_latency_ms": 920.0,
            "p95_latency_ms": 1500.0,
            "requests": 18,
            "error_rate": 1.2,
        },
    ],
    "request_purposes": {
        "authentication": {
            "name": "Authentication",
            "description": "Login and token refresh calls",
            "total_requests": 1250,
            "examples": ["POST /oauth/token", "GET /api/me"],
        },
        "telemetry": {
            "name": "Telemetry",
            "description": "Analytics beacons",
            "total_requests": 87,
            "examples": [],
        },
    },
    "path_pattern_analysis": {
        "total_patterns": 42,
        "top_ten_traffic_patterns": [
            {
                "url": "GET /api/items/{id}",
                "total_requests": 500,
                "success_rate": 98.5,
                "success_count": 492,
                "error_4xx_count": 8,
                "error_5xx_count": 0,
                "avg_latency_ms": 120.4,
                "max_latency_ms": 980.0,
                "example_urls": ["/api/items/1", "/api/items/2", "/api/items/3"],
            },
            {
                "url": "POST /api/cart",
                "total_requests": 300,
                "example_urls": [],
            },
        ],
        "top_ten_error_patterns": [
            {
                "pattern": "/api/checkout",
                "method": "POST",
                "total_requests": 40,
                "error_4xx_count": 2,
                "error_5xx_count": 3,
            },
        ],
    },
    "response_codes": {"200": 9000, "304": 50, "404": 50, "500": 3},
    "file_path": "trace.har",
    "analysis_timestamp": "2024-01-15T14:05:09Z",
}


@pytest.fixture
def raw_result():
    return copy.deepcopy(RAW_RESULT)


@pytest.fixture
def envelope(raw_result):
    return {"success": True, "data": raw_result, "cached": True}

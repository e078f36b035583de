"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "datatools-e2e report",
    "type": "object",
    "required": ["schema_version", "generated_at", "run_stamp", "summary", "cases"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "run_stamp": {"type": "string"},
        "summary": {
            "type": "object",
            "required": ["total", "passed", "failed", "errors", "blocked", "app_url", "fail_fast", "duration_s"],
            "properties": {
                "total": {"type": "integer"},
                "passed": {"type": "integer"},
                "failed": {"type": "integer"},
                "errors": {"type": "integer"},
                "blocked": {"type": "integer"},
                "app_url": {"type": "string"},
                "fail_fast": {"type": "boolean"},
                "coverage": {"type": "boolean"},
                "duration_s": {"type": "number"},
            },
        },
        "cases": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "status", "duration_ms", "dependencies"],
                "properties": {
                    "name": {"type": "string"},
                    "status": {"enum": ["passed", "failed", "error", "blocked"]},
                    "duration_ms": {"type": "number"},
                    "dependencies": {"type": "array", "items": {"type": "string"}},
                    "error": {"type": "string"},
                    "screenshot": {"type": "string"},
                },
            },
        },
    },
}

"""Service layer composing repositories into API payloads."""

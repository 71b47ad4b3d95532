"""🏛️ Доменний шар сервісу."""

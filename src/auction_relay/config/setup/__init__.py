"""📦 Складання сервісів (DI)."""

"""🧰 Спільні модулі: помилки, метрики, утиліти."""
